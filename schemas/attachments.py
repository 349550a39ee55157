# schemas/attachments.py
from datetime import datetime
from typing import List, Optional

from schemas.base import CamelModel


class FolderOut(CamelModel):
    id: str
    name: str
    question_id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class FolderSummary(FolderOut):
    file_count: int = 0


class FolderCreate(CamelModel):
    name: str
    question_id: str


class FolderUpdate(CamelModel):
    name: Optional[str] = None


class FileBrief(CamelModel):
    id: str
    name: str
    type: str


class FileOut(CamelModel):
    id: str
    name: str
    type: str
    url: str
    size: int
    description: Optional[str] = None
    question_id: str
    folder_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class FileWithFolder(FileOut):
    folder: Optional[FolderOut] = None


class FileUpdate(CamelModel):
    name: Optional[str] = None
    description: Optional[str] = None
    # explicit null moves the file out of its folder
    folder_id: Optional[str] = None


class QuestionRef(CamelModel):
    id: str
    title: str


class FolderDetail(FolderSummary):
    question: QuestionRef
    files: List[FileOut] = []


class FileDetail(FileWithFolder):
    question: QuestionRef
