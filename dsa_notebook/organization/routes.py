from fastapi import APIRouter, HTTPException, status
from .schemas import SaveOrderRequest, SaveOrderResponse, ResetOrderResponse
from .utils import save_order_in_db, reset_order_in_db
from dsa_notebook.database.mongo import log_error

router = APIRouter(prefix="/api", tags=["organization"])

@router.post("/save-order", response_model=SaveOrderResponse)
async def save_order(order_request: SaveOrderRequest):
    """
    Save the print order of every folder and entry in one request.

    Args:
        order_request: Lists of {id, printOrder, parentId} for entries and {id, printOrder} for folders

    Returns:
        SaveOrderResponse with the number of records written and the ids that were skipped
    """
    try:
        return await save_order_in_db(order_request)
    except Exception as e:
        await log_error(
            error=e,
            location="organization/routes.py - save_order"
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save order"
        )

@router.post("/reset-order", response_model=ResetOrderResponse)
async def reset_order():
    """
    Reset every entry to the unorganized folder and delete all folders.
    """
    try:
        return await reset_order_in_db()
    except Exception as e:
        await log_error(
            error=e,
            location="organization/routes.py - reset_order"
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to reset order"
        )
