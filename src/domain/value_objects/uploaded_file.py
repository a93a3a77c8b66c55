"""Uploaded file value object.

The single file received by a multipart operation, buffered in memory and
attached to the request as ``request.state.file`` before the handler runs.

Usage:
    async def uploadFile(request: Request) -> dict:
        uploaded: UploadedFile = request.state.file
        return {"name": uploaded.originalname, "size": uploaded.size}
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, kw_only=True)
class UploadedFile:
    """File received through the operation's upload field.

    Attributes:
        fieldname: Form field name (the multipart schema's single property).
        originalname: File name supplied by the client.
        encoding: Transfer encoding of the part ("7bit" when not declared).
        mimetype: Content type of the part.
        buffer: File contents.
        size: Length of ``buffer`` in bytes.
    """

    fieldname: str
    originalname: str
    encoding: str
    mimetype: str
    buffer: bytes
    size: int
