# run.py

import uvicorn
from device_detect.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "device_detect.main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
    )
