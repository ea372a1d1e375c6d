from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy.orm import Session

from sockkeeper.database import get_db, get_read_db

from . import schemas, services
from .errors import FileProcessingError

router = APIRouter(
    prefix="/api/socks",
    tags=["socks"],
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": schemas.ErrorResponse},
    },
)


@router.post("/income", status_code=status.HTTP_200_OK)
def register_income(
    color: str = Query(..., min_length=1, description="Sock color", examples=["red"]),
    cotton_part: int = Query(..., alias="cottonPart", description="Cotton percentage", examples=[50]),
    quantity: int = Query(..., description="Number of pairs received", examples=[100]),
    db: Session = Depends(get_db),
) -> None:
    services.register_income(db, color=color, cotton_part=cotton_part, quantity=quantity)
    db.commit()


@router.post(
    "/outcome",
    status_code=status.HTTP_200_OK,
    responses={status.HTTP_404_NOT_FOUND: {"model": schemas.ErrorResponse}},
)
def register_outcome(
    color: str = Query(..., min_length=1, description="Sock color", examples=["red"]),
    cotton_part: int = Query(..., alias="cottonPart", description="Cotton percentage", examples=[50]),
    quantity: int = Query(..., description="Number of pairs shipped", examples=[50]),
    db: Session = Depends(get_db),
) -> None:
    services.register_outcome(db, color=color, cotton_part=cotton_part, quantity=quantity)
    db.commit()


@router.get("", response_model=List[schemas.SocksRead])
def list_socks(
    color: Optional[str] = Query(None, description="Exact color match"),
    min_cotton_part: Optional[int] = Query(None, alias="minCottonPart", ge=0, le=100),
    max_cotton_part: Optional[int] = Query(None, alias="maxCottonPart", ge=0, le=100),
    sort_by: Optional[str] = Query(None, alias="sortBy", description="color or cottonPart"),
    db: Session = Depends(get_read_db),
):
    """
    List socks matching every supplied filter.

    Without filters the whole warehouse is returned. ``sortBy`` sorts
    ascending by color or by cotton part.
    """
    return services.list_socks(
        db,
        color=color,
        min_cotton_part=min_cotton_part,
        max_cotton_part=max_cotton_part,
        sort_by=sort_by,
    )


@router.put(
    "/{socks_id}",
    response_model=schemas.SocksRead,
    responses={status.HTTP_404_NOT_FOUND: {"model": schemas.ErrorResponse}},
)
def update_socks(
    socks_id: int,
    color: str = Query(..., min_length=1, examples=["blue"]),
    cotton_part: int = Query(..., alias="cottonPart", examples=[70]),
    quantity: int = Query(..., examples=[30]),
    db: Session = Depends(get_db),
):
    result = services.update_socks(
        db,
        socks_id,
        color=color,
        cotton_part=cotton_part,
        quantity=quantity,
    )
    db.commit()
    return result


@router.post("/batch", response_model=schemas.SocksBatchResult)
async def upload_socks_batch(
    file: UploadFile = File(..., description="CSV file: color,cottonPart,quantity per line"),
    db: Session = Depends(get_db),
):
    try:
        content = await file.read()
    except OSError as exc:
        raise FileProcessingError(f"Error while processing file: {exc}") from exc

    imported = services.process_socks_batch(db, content=content, filename=file.filename)
    db.commit()
    return schemas.SocksBatchResult(imported=imported)
