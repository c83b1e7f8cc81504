import bcrypt

MAX_BCRYPT_BYTES = 72
BCRYPT_ROUNDS = 12


def hash_password(password: str) -> str:
    return bcrypt.hashpw(
        password.encode("utf-8")[:MAX_BCRYPT_BYTES],
        bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    ).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode("utf-8")[:MAX_BCRYPT_BYTES], hashed.encode("utf-8"))
