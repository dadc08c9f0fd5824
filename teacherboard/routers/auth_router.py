# /teacherboard/routers/auth_router.py

"""
Sign-in for teachers.

The browser obtains a Google ID token from the sign-in popup and posts it
here. Once the identity provider vouches for it, the backend issues its own
bearer token; accounts themselves are never stored.
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ..core import security
from ..core.deps import get_current_teacher
from ..core.exceptions import AuthenticationError
from ..models.auth_model import GoogleSignInRequest, TeacherAccount, Token
from ..services.identity_service import GoogleIdentityProvider, get_identity_provider

router = APIRouter()


@router.post("/google", response_model=Token, summary="Exchange a Google ID Token for a Bearer Token")
def sign_in_with_google(
    sign_in: GoogleSignInRequest,
    provider: GoogleIdentityProvider = Depends(get_identity_provider),
):
    try:
        account = provider.verify(sign_in.idToken)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        )
    access_token = security.create_access_token(account.model_dump())
    return Token(access_token=access_token, token_type="bearer", account=account)


@router.get("/me", response_model=TeacherAccount, summary="Get the Signed-in Teacher")
def read_current_teacher(current_teacher: TeacherAccount = Depends(get_current_teacher)):
    return current_teacher


@router.post("/signout", status_code=status.HTTP_204_NO_CONTENT, summary="Sign Out")
def sign_out(current_teacher: TeacherAccount = Depends(get_current_teacher)):
    # Tokens are stateless; the client discards its copy.
    return Response(status_code=status.HTTP_204_NO_CONTENT)
