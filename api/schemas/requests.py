from pydantic import BaseModel, ConfigDict, Field, field_validator


class SelectBaseRequest(BaseModel):
	base: str = Field(..., min_length=3, max_length=3)

	model_config = ConfigDict(json_schema_extra={'example': {'base': 'EUR'}})

	@field_validator('base')
	@classmethod
	def uppercase_currency(cls, v: str):
		return v.upper()
