"""
Credentials feature: set API keys at runtime.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from study_companion.core.credentials import Credentials
from study_companion.core.dependencies import get_credentials

router = APIRouter()


class CredentialsRequest(BaseModel):
    openaiApiKey: str | None = None
    pineconeApiKey: str | None = None
    pineconeIndexName: str | None = None


@router.post("/set-credentials")
async def set_credentials(
    data: CredentialsRequest,
    credentials: Credentials = Depends(get_credentials),
):
    """Replace the OpenAI key, Pinecone key and index name used by every client."""
    if not (data.openaiApiKey and data.pineconeApiKey and data.pineconeIndexName):
        return JSONResponse(status_code=400, content={"error": "Missing required credentials"})

    credentials.update(
        openai_api_key=data.openaiApiKey,
        pinecone_api_key=data.pineconeApiKey,
        pinecone_index_name=data.pineconeIndexName,
    )
    return {"message": "Credentials set successfully"}
