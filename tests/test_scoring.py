"""Tests for the question importance score."""

import pytest

from app.application.scoring.importance import (
    calculate_importance_score,
    last_appeared_year,
    parse_years,
)


class TestWorkedExamples:
    def test_frequent_recent_question_is_capped_at_100(self):
        # 45 recency + 30 frequency + 24 global + 15 spread = 114
        assert calculate_importance_score(3, "2019,2021,2023", 80, current_year=2024) == 100

    def test_new_question_with_defaults(self):
        assert calculate_importance_score(1, "", 50, current_year=2024) == 25.0
        assert calculate_importance_score(1, "", 50, current_year=1999) == 25.0

    def test_partial_components(self):
        # recency: 2022 only (2010 is outside the window) -> 15
        # frequency 10, global 6, spread 2 years -> 10
        assert calculate_importance_score(1, "2010,2022", 20, current_year=2024) == 41.0

    def test_rounding_to_two_decimals(self):
        assert calculate_importance_score(1, "", 33.333, current_year=2024) == 20.0


class TestYearParsing:
    def test_malformed_tokens_are_ignored(self):
        clean = calculate_importance_score(2, "2020,2022", 40, current_year=2024)
        noisy = calculate_importance_score(2, " 2020 , abc,,2022, 20x1 ", 40, current_year=2024)
        assert noisy == clean

    def test_out_of_range_years_are_ignored(self):
        base = calculate_importance_score(1, "2021", 50, current_year=2024)
        assert calculate_importance_score(1, "2021,1900,1850,2099", 50, current_year=2024) == base

    def test_duplicate_years_count_once_for_spread(self):
        # recency counts each occurrence, spread counts distinct years
        assert calculate_importance_score(1, "2023,2023", 0, current_year=2024) == 45.0

    def test_parse_years(self):
        assert parse_years("2019, 2021,foo,,2023") == [2019, 2021, 2023]
        assert parse_years("") == []
        assert parse_years(None) == []

    def test_tokens_contribute_their_leading_digits(self):
        assert parse_years("2021.5, 2020abc, x, -3") == [2021, 2020, -3]
        assert last_appeared_year("2021.5") == 2021

    def test_last_appeared_year(self):
        assert last_appeared_year("2019,2023,2021") == 2023
        assert last_appeared_year("n/a") is None
        assert last_appeared_year("") is None


class TestScoreProperties:
    @pytest.mark.parametrize("repeat_count", [1, 2, 5, 50])
    @pytest.mark.parametrize("global_importance", [0, 37.5, 100])
    @pytest.mark.parametrize("years", ["", "2020", "2015,2016,2017,2018,2019,2020,2021,2022,2023,2024"])
    def test_score_stays_in_range(self, repeat_count, global_importance, years):
        score = calculate_importance_score(repeat_count, years, global_importance, current_year=2024)
        assert 0 <= score <= 100

    def test_monotonic_in_repeat_count(self):
        scores = [calculate_importance_score(n, "2020", 30, current_year=2024) for n in range(1, 8)]
        assert scores == sorted(scores)

    def test_monotonic_in_global_importance(self):
        scores = [calculate_importance_score(1, "2020", g, current_year=2024) for g in range(0, 101, 10)]
        assert scores == sorted(scores)

    def test_global_importance_is_not_clamped_by_the_function(self):
        # Out of range input passes through; only the total is bounded
        assert calculate_importance_score(1, "", 150, current_year=2024) == 55.0
        assert calculate_importance_score(1, "", -100, current_year=2024) == 0.0
