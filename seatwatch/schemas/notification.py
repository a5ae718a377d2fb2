from pydantic import BaseModel
from typing import List


class EmbedField(BaseModel):
    name: str
    value: str
    inline: bool = False


class Embed(BaseModel):
    title: str
    description: str
    color: int
    fields: List[EmbedField]


class WebhookPayload(BaseModel):
    """Body of a Discord webhook execute request."""
    embeds: List[Embed]
