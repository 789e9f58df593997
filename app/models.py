from typing import List

from pydantic import BaseModel, model_validator


class FileListOut(BaseModel):
    files: List[str]
    count: int = 0

    @model_validator(mode="after")
    def sync_count(self):
        self.count = len(self.files)
        return self
