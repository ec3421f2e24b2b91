from sqlmodel import Field

from farmpro.models.base_model import BaseModel


class Setting(BaseModel, table=True):
    __tablename__ = "settings"

    key: str = Field(max_length=128, unique=True, index=True)
    value: str = Field(default="")

    def __repr__(self):
        return f"<Setting {self.key}={self.value!r}>"
