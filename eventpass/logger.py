# configuracion del sistema de logging
# cada modulo usa un logger hijo "eventpass.<modulo>" que hereda el handler del principal
import logging
from .config import LOG_FILE

logger = logging.getLogger("eventpass")  # obtenemos el logger principal
logger.setLevel(logging.DEBUG)           # establecemos el nivel de logging a DEBUG

# si el logger no tiene handlers --> se añade un FileHandler para guardar los logs en un archivo
if not logger.handlers:
    fh = logging.FileHandler(LOG_FILE, encoding='utf-8')    # creamos el FileHandler
    fh.setLevel(logging.DEBUG)
    # el nombre del logger hijo indica el modulo que escribe
    formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    fh.setFormatter(formatter)
    logger.addHandler(fh)                                   # añadimos el handler al logger


# funcion que devuelve el logger hijo de un modulo (p.ej. "codec" --> "eventpass.codec")
def get_logger(module: str) -> logging.Logger:
    return logger.getChild(module)
