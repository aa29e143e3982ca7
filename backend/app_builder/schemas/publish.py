"""Publish and published-app schemas."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app_builder.services.publisher import PublishOrchestrator, PublishState


class _Body(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PublishBody(_Body):
    app_name: str = Field(..., min_length=1, max_length=63)
    custom_domain: str | None = Field(None, max_length=253)


class NameSuggestion(_Body):
    app_name: str
    base_domain: str


class PublishStatusResponse(_Body):
    state: PublishState
    log: list[str]
    url: str | None = None
    app_name: str | None = None
    viewer_path: str | None = None
    custom_domain: str | None = None
    cname_target: str | None = None
    error: str | None = None

    @classmethod
    def of(cls, orchestrator: PublishOrchestrator) -> "PublishStatusResponse":
        result = orchestrator.result
        return cls(
            state=orchestrator.state,
            log=list(orchestrator.log),
            url=result.url if result else None,
            app_name=result.app_name if result else None,
            viewer_path=result.viewer_path if result else None,
            custom_domain=result.custom_domain if result else None,
            cname_target=result.cname_target if result else None,
            error=orchestrator.error,
        )


class PublishedConfigResponse(_Body):
    success: bool = True
    config: dict


class PublishedStatusResponse(_Body):
    success: bool
    message: str
    url: str | None = None
