from typing import Annotated

from pydantic import BaseModel, Field, field_validator
from pydantic_core.core_schema import ValidationInfo
from pydantic_settings import BaseSettings, SettingsConfigDict, PydanticBaseSettingsSource, YamlConfigSettingsSource

from lineserve.bootstrap.config.loader import get_configfile, DEFAULT_PORT
from lineserve.core.models.config import ServerConfig
from lineserve.core.models.framing import FramingMode


class ServerSettings(BaseModel):
    host: Annotated[
        str,
        Field(
            description="Bind address for the listener. All interfaces by default.",
            default="0.0.0.0"
        )
    ]

    port: Annotated[
        int,
        Field(
            description="TCP port to listen on. 0 lets the OS pick a free port.",
            default=DEFAULT_PORT,
            ge=0,
            le=65535
        )
    ]

    backlog: Annotated[
        int,
        Field(
            description=(
                "Maximum number of pending TCP connections.\n"
                "Only one client is served at a time; the others wait here."
            ),
            default=8,
            gt=0
        )
    ]


class SessionSettings(BaseModel):
    framing: Annotated[
        FramingMode,
        Field(
            description=(
                "Framing policy applied to inbound bytes.\n"
                "'line' answers every line-feed terminated line, 'raw' answers\n"
                "every receive call and logs an escaped dump of it."
            ),
            default=FramingMode.line
        )
    ]

    max_line_size: Annotated[
        int,
        Field(
            description=(
                "Maximum number of bytes accumulated without a line-feed.\n"
                "Exceeding it terminates the session (line mode only)."
            ),
            default=8192,
            gt=0
        )
    ]

    line_recv_size: Annotated[
        int,
        Field(
            description="Bytes requested per receive call in line mode.",
            default=512,
            gt=0
        )
    ]

    raw_recv_size: Annotated[
        int,
        Field(
            description="Bytes requested per receive call in raw mode.",
            default=1024,
            gt=0
        )
    ]

    reply: Annotated[
        str,
        Field(
            description=(
                "Acknowledgement text sent for every unit.\n"
                "A single line-feed is appended on the wire."
            ),
            default="hello from server"
        )
    ]

    @field_validator("reply")
    @classmethod
    def validate_reply(cls, v: str, _: ValidationInfo) -> str:
        if not v.isascii():
            raise ValueError("reply must be ASCII")
        if "\r" in v or "\n" in v:
            raise ValueError("reply must not contain line terminators")
        return v


class LineServeConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LINESERVE_",
        env_nested_delimiter="__",
        extra="ignore"
    )

    server: Annotated[
        ServerSettings,
        Field(
            description=(
                "Listener configuration.\n"
                "Controls the address, port and backlog of the listening socket."
            ),
            default_factory=ServerSettings
        )
    ]

    session: Annotated[
        SessionSettings,
        Field(
            description=(
                "Per-connection configuration.\n"
                "Controls how inbound bytes are framed into messages and what\n"
                "is sent back for each of them."
            ),
            default_factory=SessionSettings
        )
    ]

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        sources: tuple[PydanticBaseSettingsSource, ...] = (init_settings, env_settings)
        configfile = get_configfile()
        if configfile is not None:
            sources += (YamlConfigSettingsSource(settings_cls, yaml_file=configfile),)
        return sources

    def to_server_config(self) -> ServerConfig:
        server = self.server
        session = self.session

        return ServerConfig(
            host=server.host,
            port=server.port,
            backlog=server.backlog,
            framing=session.framing,
            line_recv_size=session.line_recv_size,
            raw_recv_size=session.raw_recv_size,
            max_line_size=session.max_line_size,
            reply=session.reply,
        )
