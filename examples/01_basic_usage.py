"""
Basic usage example of fastapi-param-converter.

Demonstrates:
- Registering the request body converter with a pydantic serializer
- Binding a request body to a model through a FastAPI dependency
- Reading the converted object in the endpoint
"""

from fastapi import Depends, FastAPI
from pydantic import BaseModel

from fastapi_param_converter import (
    BindingConfiguration,
    ParamConverterManager,
    PydanticSerializer,
    RequestBodyParamConverter,
    RequestContext,
    converter_dependency,
    enrich_openapi,
)

app = FastAPI(title="Basic Param Converter Example")


class Post(BaseModel):
    name: str
    body: str


manager = ParamConverterManager(
    RequestBodyParamConverter(PydanticSerializer(formats=("json", "form")))
)

post_binding = converter_dependency(manager, BindingConfiguration("post", Post))


@app.post("/posts")
async def create_post(ctx: RequestContext = Depends(post_binding)):
    """Create a post from a JSON or form-encoded body."""
    post: Post = ctx.state["post"]
    return {"message": f"Created {post.name!r}", "post": post}


# Document request bodies and 400 responses
enrich_openapi(app)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)

    # Test with:
    # curl -X POST -H "Content-Type: application/json" \
    #   -d '{"name": "Post 1", "body": "This is a blog post"}' http://localhost:8000/posts
    # curl -X POST -d 'name=Post+1&body=hello' http://localhost:8000/posts
    # curl -X POST -H "Content-Type: text/html" -d '<p/>' http://localhost:8000/posts
