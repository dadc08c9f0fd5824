# /teacherboard/models/student_view_model.py

from pydantic import BaseModel
from typing import List

from .session_model import PublicSession
from .content_model import Notice, SavedLink, BookContent, ClassContent


class StudentView(BaseModel):
    """
    Everything a student page shows. Built per page load and never stored.
    Content lists for kinds the teacher has switched off are simply empty.
    """
    session: PublicSession
    notices: List[Notice] = []
    links: List[SavedLink] = []
    chalkboardNotes: List[ClassContent] = []
    bookContents: List[BookContent] = []
