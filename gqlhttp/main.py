from logging import getLogger
from fastapi.middleware.cors import CORSMiddleware
from fastapi_offline import FastAPIOffline
from gqlhttp.adapters.graphql_engine import GraphQLEngine
from gqlhttp.config.general import general
from gqlhttp.interfaces.options import OptionsProvider
from gqlhttp.middleware.requestlogger import RequestLogger
from gqlhttp.routers.graphql import make_router

logger = getLogger(__name__)


def create_app(options: OptionsProvider, engine: GraphQLEngine | None = None):
    app = FastAPIOffline(
        title=general.PROJECT_NAME,
        version=general.API_VERSION,
        root_path=general.MOUNT_PATH,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestLogger)

    app.include_router(make_router(options, path=general.GRAPHQL_PATH, engine=engine))
    logger.info("GraphQL endpoint mounted at %s%s", general.MOUNT_PATH, general.GRAPHQL_PATH)
    return app
