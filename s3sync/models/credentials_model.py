from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class CredentialsModel:
    access_key_id: str
    secret_access_key: str
    session_token: str

    def as_env(self) -> Dict[str, str]:
        return {
            "AWS_ACCESS_KEY_ID": self.access_key_id,
            "AWS_SECRET_ACCESS_KEY": self.secret_access_key,
            "AWS_SESSION_TOKEN": self.session_token,
        }
