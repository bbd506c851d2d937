from .exam_views import *
from .question_views import *
