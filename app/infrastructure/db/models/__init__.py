from .subject_model import Subject
from .system_model import System
from .marks_model import Marks
from .question_model import Question
from .folder_model import Folder
from .file_model import File

__all__ = ["Subject", "System", "Marks", "Question", "Folder", "File"]
