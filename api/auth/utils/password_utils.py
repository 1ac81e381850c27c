import bcrypt


# 비밀번호 해시 생성 (bcrypt, salt 포함)
def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


# 비밀번호 검증: 해시 형식이 잘못된 경우 불일치로 처리
def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))

    except ValueError:
        return False
