from mcp.types import TextContent
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ToolResult(BaseSchema):
    content: list[TextContent]
    is_error: bool = Field(default=False)

    @classmethod
    def text(cls, text: str) -> "ToolResult":
        return cls(content=[TextContent(type="text", text=text)])

    @classmethod
    def error(cls, text: str) -> "ToolResult":
        return cls(content=[TextContent(type="text", text=text)], is_error=True)

    def joined_text(self) -> str:
        return "\n".join(item.text for item in self.content)
