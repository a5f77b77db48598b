from fastapi import APIRouter, Depends

from smartsync.deps import get_current_user_id
from smartsync.errors import AuthError, ForbiddenError
from smartsync.repositories import UserRepository, get_users
from smartsync.schemas.user import BrandingIn

router = APIRouter(prefix="/user", tags=["user"])


@router.put("/branding")
def update_branding(body: BrandingIn, user_id: str = Depends(get_current_user_id), users: UserRepository = Depends(get_users)):
    user = users.get(user_id)
    if user is None:
        raise AuthError("Unauthorized")
    if not user.is_premium:
        raise ForbiddenError("Branding is available to Premium users only.")

    # fields left out of the body are cleared, as every form submit sends all four
    users.update_branding(user_id, body.brand_name, body.logo_url, body.primary_color, body.custom_domain)
    return {"success": True}
