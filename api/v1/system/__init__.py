from api.v1.system.router import router as SYSTEM_ROUTER

__all__ = ["SYSTEM_ROUTER"]
