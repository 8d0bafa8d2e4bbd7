"""Pydantic model for the WhatsApp relay endpoint."""

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WhatsAppRelayRequest(BaseModel):
    """Body of POST /api/whatsapp: ``{message, phoneNumber?}``."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str
    phone_number: Optional[str] = None
