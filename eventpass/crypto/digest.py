# funciones para generar secretos y computar/verificar el digest SHA-256 con secreto
from os import urandom
from cryptography.hazmat.primitives import hashes, constant_time
from ..logger import get_logger
from ..common.constants import ALGO_SHA256

logger = get_logger("digest")


# funcion para generar un secreto aleatorio en hexadecimal (para QR_SECRET_KEY)
def generate_secret(bits: int = 256) -> str:
    if bits < 128:
        raise ValueError("secreto: longitud mínima 128 bits.")
    return urandom(bits // 8).hex()


# funcion para calcular SHA-256(mensaje || secreto)
# el secreto va concatenado al final del mensaje, no es un HMAC, para ser compatible con los tickets emitidos
def compute_keyed_digest(secret: bytes, message: bytes) -> bytes:
    h = hashes.Hash(hashes.SHA256())
    h.update(message)
    h.update(secret)
    digest = h.finalize()
    logger.debug(f"DIGEST compute: algorithm={ALGO_SHA256}, message_len={len(message)}")
    return digest


# igual que compute_keyed_digest pero devuelve el hex en minusculas
def compute_keyed_digest_hex(secret: bytes, message: bytes) -> str:
    return compute_keyed_digest(secret, message).hex()


# funcion para comparar dos digests en tiempo constante
def digests_match(expected: bytes, presented: bytes) -> bool:
    return constant_time.bytes_eq(expected, presented)


# imprime un secreto nuevo para QR_SECRET_KEY (uso: python -m eventpass.crypto.digest --bits 256)
def main(argv=None) -> None:
    import argparse
    parser = argparse.ArgumentParser(description="Genera un valor para QR_SECRET_KEY")
    parser.add_argument("--bits", type=int, default=256)
    args = parser.parse_args(argv)
    print(generate_secret(args.bits))


if __name__ == "__main__":
    main()
