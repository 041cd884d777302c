"""Transcript utility routes."""

from fastapi import APIRouter

from corpusdb.schemas.schemas import TokenizeRequest, TokenizeResponse, TokenResponse
from corpusdb.services.transcript import tokenize

router = APIRouter(prefix="/api/transcripts", tags=["Transcripts"])


@router.post(
    "/tokenize",
    response_model=TokenizeResponse,
    summary="Tokenize a transcribed segment",
    description="Normalize whitespace and split a segment into delimiter and word tokens.",
)
async def tokenize_segment(request: TokenizeRequest):
    tokenized = tokenize(request.text)
    return TokenizeResponse(
        source=tokenized.source,
        tokens=[
            TokenResponse(
                kind=t.kind.value,
                delim=t.delim.value if t.delim else None,
                start=t.start,
                end=t.end,
                text=tokenized.as_str(t),
            )
            for t in tokenized.tokens
        ],
    )
