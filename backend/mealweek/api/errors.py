from fastapi import HTTPException

from mealweek.errors import MealPlanError, NotFoundError, PersistenceError, ValidationError


def to_http(error: MealPlanError) -> HTTPException:
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=str(error))
    if isinstance(error, ValidationError):
        detail = {"message": str(error), "errors": [e.get("msg", str(e)) for e in error.errors]}
        return HTTPException(status_code=422, detail=detail)
    if isinstance(error, PersistenceError):
        return HTTPException(
            status_code=500,
            detail={
                "message": "Transaction rolled back",
                "operation": error.operation,
                "context": {k: str(v) for k, v in error.context.items()},
            },
        )
    return HTTPException(status_code=500, detail=str(error))
