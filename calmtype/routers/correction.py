"""Word auto-correction endpoint."""
from fastapi import APIRouter, Request

from calmtype.schemas.correction import CorrectionInSchema, CorrectionOutSchema
from calmtype.services.correction import SOURCE_LOCAL

router = APIRouter(prefix="/api", tags=["correction"])


@router.post("/correct", response_model=CorrectionOutSchema)
async def correct_word(body: CorrectionInSchema, request: Request):
    """DeepSeek when configured; the local dictionary otherwise or on failure."""
    word = body.word.strip()
    if not word:
        return CorrectionOutSchema(original=body.word, corrected=body.word, source=SOURCE_LOCAL)
    corrector = request.app.state.corrector
    result = await corrector.correct(word)
    return CorrectionOutSchema(original=result.original, corrected=result.corrected, source=result.source)
