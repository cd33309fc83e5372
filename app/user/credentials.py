import os

import bcrypt
from dotenv import load_dotenv

load_dotenv()

# 비밀번호 저장 방식: plain (입력값 그대로 저장) | bcrypt
PASSWORD_SCHEME = os.getenv("PASSWORD_SCHEME", "plain")


class PasswordPolicy:
    """비밀번호를 어떻게 저장하고 검증할지 결정하는 인터페이스

    verify 는 아직 로그인 기능이 없어 라우터에서 호출하지 않지만, 저장 방식과 짝을 이루도록 함께 둔다.
    """

    name = "base"

    def prepare(self, password: str) -> str:
        raise NotImplementedError

    def verify(self, plain_password: str, stored_password: str) -> bool:
        raise NotImplementedError


class PlainPasswordPolicy(PasswordPolicy):
    name = "plain"

    def prepare(self, password: str) -> str:
        return password

    def verify(self, plain_password: str, stored_password: str) -> bool:
        return plain_password == stored_password


class BcryptPasswordPolicy(PasswordPolicy):
    name = "bcrypt"

    # 비밀번호 해싱
    def prepare(self, password: str) -> str:
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")

    # 비밀번호 검증
    def verify(self, plain_password: str, stored_password: str) -> bool:
        try:
            return bcrypt.checkpw(plain_password.encode("utf-8"), stored_password.encode("utf-8"))
        except ValueError:
            # 해시 형식이 아닌 값 (plain 으로 저장된 기존 데이터)
            return False


POLICIES = {
    PlainPasswordPolicy.name: PlainPasswordPolicy,
    BcryptPasswordPolicy.name: BcryptPasswordPolicy,
}


def build_password_policy(scheme: str) -> PasswordPolicy:
    scheme = scheme.lower()
    if scheme not in POLICIES:
        raise ValueError(f"지원하지 않는 PASSWORD_SCHEME 입니다: {scheme}")
    return POLICIES[scheme]()


# FastAPI 의존성 주입용
def get_password_policy() -> PasswordPolicy:
    return build_password_policy(PASSWORD_SCHEME)
