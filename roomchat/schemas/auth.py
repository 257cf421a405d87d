from pydantic import BaseModel, Field, field_validator

BCRYPT_MAX_BYTES = 72

class Credentials(BaseModel):
    username: str = Field(min_length=1, max_length=120)
    password: str = Field(min_length=1, max_length=BCRYPT_MAX_BYTES)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        # bcrypt silently ignores everything past 72 bytes
        if len(v.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise ValueError(f"password must be at most {BCRYPT_MAX_BYTES} bytes")
        return v

class TokenOut(BaseModel):
    token: str
    token_type: str = "bearer"
    username: str

class MemberOut(BaseModel):
    id: str
    username: str
