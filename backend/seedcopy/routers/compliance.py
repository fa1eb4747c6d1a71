from fastapi import APIRouter, Depends

from seedcopy.auth.deps import CurrentUser, get_current_user
from seedcopy.schemas.intake import ComplianceCheckRequest
from seedcopy.services.compliance import check_texts

router = APIRouter()


@router.post("/compliance/check")
async def check(
    body: ComplianceCheckRequest,
    user: CurrentUser = Depends(get_current_user),
):
    """Score each text against the flagged-phrase lexicon."""
    return {"results": check_texts(body.texts)}
