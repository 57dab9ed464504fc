from fastapi import Header, HTTPException, Request
from jose import JWTError, jwt


def verify_token(request: Request, authorization: str = Header(None)):
    secret = request.app.state.settings.jwt_secret
    try:
        if not secret or not authorization:
            raise JWTError("missing credentials")
        scheme, token = authorization.split()
        if scheme.lower() != "bearer":
            raise JWTError("unsupported scheme")
        return jwt.decode(token, secret, algorithms=["HS256"])
    except (ValueError, JWTError):
        raise HTTPException(status_code=401, detail="Invalid or missing token")
