import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from educollab.core import config
from educollab.core.errors import ServiceError
from educollab.database import Database
from educollab.routes import auth_routes, booking_routes, study_session_routes

logger = logging.getLogger(__name__)


def create_app(database: Database | None = None) -> FastAPI:
    app = FastAPI(title='EduCollaborate API')
    app.state.database = database or Database()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    @app.on_event('startup')
    def initialize_database() -> None:
        config.validate_runtime_config()
        app.state.database.connect()

    @app.on_event('shutdown')
    def release_database() -> None:
        app.state.database.dispose()

    @app.exception_handler(ServiceError)
    async def handle_service_error(request: Request, exc: ServiceError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(SQLAlchemyError)
    async def handle_database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception('Database error while handling %s %s', request.method, request.url.path, exc_info=exc)
        return JSONResponse(
            status_code=503,
            content={'message': 'Database unavailable. Verify DATABASE_URL and database credentials.'},
        )

    @app.get('/')
    def root():
        return {'status': 'EduCollaborate API Running'}

    app.include_router(auth_routes.router)
    app.include_router(study_session_routes.router)
    app.include_router(booking_routes.router)
    return app


logging.basicConfig(level=config.LOG_LEVEL, format='%(asctime)s %(levelname)s %(name)s: %(message)s')

app = create_app()


if __name__ == '__main__':
    import uvicorn

    uvicorn.run(app, host='0.0.0.0', port=config.PORT)
