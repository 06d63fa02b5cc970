from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from rapidwaste.core.exceptions import RapidWasteError
from rapidwaste.core.logging_config import get_logger
from rapidwaste.database.session import get_db
from rapidwaste.schemas.user import UserResponse, UserRoleUpdate
from rapidwaste.services.user_service import UserService
from rapidwaste.utils.response_utils import ResponseWrapper, handle_db_error, handle_domain_error

logger = get_logger(__name__)
router = APIRouter(prefix="/users", tags=["users"])


@router.get("/drivers")
def list_driver_users(db: Session = Depends(get_db)):
    try:
        users = UserService(db).find_drivers()
        return ResponseWrapper.listing(
            [UserResponse.model_validate(u) for u in users],
            message="Driver users fetched successfully",
        )
    except SQLAlchemyError as e:
        logger.exception("Database error occurred while fetching driver users")
        raise handle_db_error(e)


@router.get("/{user_id}")
def get_user(user_id: int, db: Session = Depends(get_db)):
    try:
        user = UserService(db).find_by_id(user_id)
        return ResponseWrapper.success(UserResponse.model_validate(user), message="User fetched successfully")
    except RapidWasteError as e:
        raise handle_domain_error(e)
    except SQLAlchemyError as e:
        logger.exception(f"Database error occurred while fetching user id={user_id}")
        raise handle_db_error(e)


@router.patch("/{user_id}/role")
def update_user_role(user_id: int, payload: UserRoleUpdate, db: Session = Depends(get_db)):
    try:
        user = UserService(db).update_role(user_id, payload.role)
        return ResponseWrapper.updated(UserResponse.model_validate(user), message="User role updated successfully")
    except RapidWasteError as e:
        db.rollback()
        raise handle_domain_error(e)
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception(f"Database error occurred while updating role of user id={user_id}")
        raise handle_db_error(e)
    except Exception:
        db.rollback()
        logger.exception(f"Unexpected error occurred while updating role of user id={user_id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=ResponseWrapper.error(
                message="Unexpected error occurred while updating user role",
                error_code="INTERNAL_SERVER_ERROR",
            ),
        )
