"""Read-only preset catalogues."""
from fastapi import APIRouter

from ..catalog import PRINTER_PRESETS
from ..schemas import PrinterPresetRead

router = APIRouter(prefix="/api/catalog", tags=["catalog"])


@router.get("/printers", response_model=list[PrinterPresetRead])
async def list_printer_presets() -> list[PrinterPresetRead]:
    return [PrinterPresetRead(**preset._asdict()) for preset in PRINTER_PRESETS]
