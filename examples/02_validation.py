"""
Validation example of fastapi-param-converter.

Demonstrates:
- Attaching a group-aware validator to the request body converter
- Choosing validation groups per route through binding options
- Deciding in the endpoint what to do with violations
- Versioned deserialization context read by a pydantic validator
"""

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel, ValidationInfo, field_validator

from fastapi_param_converter import (
    BindingConfiguration,
    Constraint,
    ConstraintValidator,
    ParamConverterManager,
    PydanticSerializer,
    RequestBodyParamConverter,
    RequestContext,
    converter_dependency,
    enrich_openapi,
)

app = FastAPI(title="Validation Example")


class Author(BaseModel):
    name: str


class Post(BaseModel):
    name: str
    body: str
    author: Author | None = None

    @field_validator("body")
    @classmethod
    def strip_markup_for_v1(cls, value: str, info: ValidationInfo) -> str:
        # API v1 clients send HTML; later versions send plain text
        if (info.context or {}).get("version") == "1.0":
            return value.replace("<br>", "\n")
        return value


validator = (
    ConstraintValidator()
    .register(
        Post,
        Constraint("name", lambda v: bool(v.strip()), "Name should not be blank."),
        Constraint(
            "body",
            lambda v: len(v) >= 20,
            "Body should have at least 20 characters.",
            groups=("Publishing",),
            code="too_short",
        ),
    )
    .register(Author, Constraint("name", bool, "Author needs a name."))
)

manager = ParamConverterManager(
    RequestBodyParamConverter(
        PydanticSerializer(),
        version="1.0",
        validator=validator,
        validation_errors_argument="validationErrors",
    )
)

draft_binding = converter_dependency(manager, BindingConfiguration("post", Post))
publish_binding = converter_dependency(
    manager,
    BindingConfiguration(
        "post",
        Post,
        {
            "validator": {"groups": ["Default", "Publishing"], "traverse": True},
            "deserializationContext": {"version": "2.0"},
        },
    ),
)


def _reject_invalid(ctx: RequestContext) -> Post:
    errors = ctx.state["validationErrors"]
    if errors:
        raise HTTPException(status_code=422, detail=errors.to_list())
    return ctx.state["post"]


@app.post("/drafts")
async def save_draft(ctx: RequestContext = Depends(draft_binding)):
    """Drafts only need a name."""
    return {"draft": _reject_invalid(ctx)}


@app.post("/posts")
async def publish(ctx: RequestContext = Depends(publish_binding)):
    """Published posts also need a real body and a named author."""
    return {"published": _reject_invalid(ctx)}


enrich_openapi(app)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)

    # Test with:
    # curl -X POST -d '{"name": "Draft", "body": "wip"}' http://localhost:8000/drafts
    # curl -X POST -d '{"name": "Draft", "body": "wip"}' http://localhost:8000/posts
