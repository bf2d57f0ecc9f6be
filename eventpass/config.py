# configuracion global para la aplicacion
import os

# rutas y parametros del archivo de log
LOG_FILE = os.getenv("LOG_FILE", "eventpass.log")

# ruta para almacenar los datos de eventos, usuarios y registros
DATA_PATH = os.getenv("DATA_PATH", "data")

# secreto compartido para firmar los tickets QR
# si no esta definido se usa el valor por defecto (riesgo de despliegue, se avisa en el log)
QR_SECRET_KEY = os.getenv("QR_SECRET_KEY", "")
DEFAULT_QR_SECRET_KEY = "default-secret-key"
QR_SECRET_MIN_LENGTH = 16  # por debajo se avisa en el log, no se rechaza

# imagen QR
QR_IMAGE_WIDTH = int(os.getenv("QR_IMAGE_WIDTH", "300"))  # pixeles
QR_IMAGE_MARGIN = int(os.getenv("QR_IMAGE_MARGIN", "2"))  # modulos de zona blanca
QR_DARK_COLOR = "#000000"
QR_LIGHT_COLOR = "#FFFFFF"

# tickets
TICKET_NUMBER_PREFIX = os.getenv("TICKET_NUMBER_PREFIX", "TKT")


def load_qr_secret() -> str:
    # devuelve el secreto configurado o el valor por defecto
    return QR_SECRET_KEY or DEFAULT_QR_SECRET_KEY
