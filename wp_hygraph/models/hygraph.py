from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class UploadTicket(BaseModel):
    """Pre-signed S3 form issued by ``createAsset`` (``upload.requestPostData``)."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    url: str
    date: Optional[str] = None
    key: Optional[str] = None
    signature: Optional[str] = None
    algorithm: Optional[str] = None
    policy: Optional[str] = None
    credential: Optional[str] = None
    security_token: Optional[str] = Field(None, alias="securityToken")

    def form_fields(self) -> Dict[str, str]:
        fields = {
            "key": self.key,
            "policy": self.policy,
            "x-amz-signature": self.signature,
            "x-amz-credential": self.credential,
            "x-amz-algorithm": self.algorithm,
            "x-amz-date": self.date,
            "x-amz-security-token": self.security_token,
        }
        return {name: value for name, value in fields.items() if value is not None}


class CreatedAsset(BaseModel):
    id: str
    ticket: Optional[UploadTicket] = None
