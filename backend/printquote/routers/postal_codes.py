"""Postal code (CEP) lookup proxy."""
from fastapi import APIRouter, Depends

from ..context import AppContext
from ..dependencies import get_context, get_principal
from ..policy import Principal
from ..schemas import PostalAddress
from ..services.postal_codes import lookup_postal_code

router = APIRouter(prefix="/api/cep", tags=["lookups"])


@router.get("/{cep}", response_model=PostalAddress)
async def get_postal_code(
    cep: str,
    principal: Principal = Depends(get_principal),
    context: AppContext = Depends(get_context),
) -> PostalAddress:
    return PostalAddress(**await lookup_postal_code(cep, context))
