from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class PostIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    content: str
    image_url: str = Field(alias='imageUrl')


class PostOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    content: str
    image_url: str = Field(alias='imageUrl')
    created_at: datetime = Field(alias='createdAt')
    updated_at: Optional[datetime] = Field(default=None, alias='updatedAt')

    @classmethod
    def from_document(cls, doc: dict) -> 'PostOut':
        return cls(
            id=str(doc['_id']),
            title=doc['title'],
            content=doc['content'],
            image_url=doc.get('imageUrl', ''),
            created_at=doc['createdAt'],
            updated_at=doc.get('updatedAt'),
        )


class PostCreatedOut(BaseModel):
    success: bool = True
    data: PostOut
