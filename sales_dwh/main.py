"""
FastAPI Production Application

Main entry point for the Sales Warehouse Analytics API.
"""

from sales_dwh.serving.api import create_api_app

app = create_api_app()


if __name__ == "__main__":
    import uvicorn
    from sales_dwh.config import get_settings

    settings = get_settings()
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
