import os
from typing import Optional

from pydantic import BaseModel, Field

ENV_PREFIX = "GRIDSCRIPT_"


class Limits(BaseModel):
    """Limites do interpretador: 1000 variáveis, nomes de até 10 caracteres."""
    max_variables: int = Field(default=1000, ge=1)
    max_name_length: int = Field(default=10, ge=1)
    max_steps: Optional[int] = Field(default=None, ge=1)
    screen_rows: int = Field(default=24, ge=1)
    screen_cols: int = Field(default=80, ge=1)


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)
    reload: bool = False
    static_dir: str = "static"
    # Execuções pela web precisam terminar: um laço de goto infinito travaria o worker.
    max_steps: int = Field(default=100_000, ge=1)

    @classmethod
    def from_env(cls, environ=None):
        environ = os.environ if environ is None else environ
        values = {}
        for field in cls.model_fields:
            raw = environ.get(ENV_PREFIX + field.upper())
            if raw is not None:
                values[field] = raw
        return cls.model_validate(values)

    def limits(self):
        return Limits(max_steps=self.max_steps)
