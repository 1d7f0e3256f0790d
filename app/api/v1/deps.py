from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from jose import ExpiredSignatureError, JWTError
from asyncpg import Connection

from app.core.exceptions import AdminRequiredException, TokenExpiredException, TokenInvalidException
from app.core.security import decode_access_token
from app.db.models.user_model import UserRole
from app.db.session import get_db_connection
from app.repositories.card_repo import CardRepository
from app.repositories.transfer_repo import TransferRepository
from app.repositories.user_repo import UserRepository
from app.services.card_query_service import CardQueryService
from app.services.card_service import CardService
from app.services.transfer_service import TransferService

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token")


# ------------------ Repositories & Services ------------------ #

def get_card_repo(conn: Connection = Depends(get_db_connection)) -> CardRepository:
    return CardRepository(conn)

def get_user_repo(conn: Connection = Depends(get_db_connection)) -> UserRepository:
    return UserRepository(conn)

def get_transfer_repo(conn: Connection = Depends(get_db_connection)) -> TransferRepository:
    return TransferRepository(conn)

def get_card_service(
        card_repo: CardRepository = Depends(get_card_repo),
        user_repo: UserRepository = Depends(get_user_repo),
) -> CardService:
    return CardService(card_repo, user_repo)

def get_transfer_service(
        card_repo: CardRepository = Depends(get_card_repo),
        transfer_repo: TransferRepository = Depends(get_transfer_repo),
) -> TransferService:
    return TransferService(card_repo, transfer_repo)

def get_card_query_service(card_repo: CardRepository = Depends(get_card_repo)) -> CardQueryService:
    return CardQueryService(card_repo)


# ------------------ Caller Identity ------------------ #

async def get_current_user(
        token: str = Depends(oauth2_scheme),
        user_repo: UserRepository = Depends(get_user_repo),
) -> dict:
    try:
        payload = decode_access_token(token)
        user_id = int(payload.get("sub"))
    except ExpiredSignatureError:
        raise TokenExpiredException()
    except (JWTError, TypeError, ValueError):
        raise TokenInvalidException()

    user_data = await user_repo.get_by_id(user_id)

    if user_data is None or not user_data.get("is_active", False):
        raise TokenInvalidException()

    return user_data


async def require_admin(current_user: dict = Depends(get_current_user)) -> dict:
    if current_user.get("role") != UserRole.ADMIN.value:
        raise AdminRequiredException()
    return current_user
