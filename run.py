import uvicorn
from nordctl.logging_utility import logger


if __name__=='__main__':
    logger.info("Starting nordctl application")
    uvicorn.run("nordctl.main:app", host="127.0.0.1", port=8000, reload=True)
