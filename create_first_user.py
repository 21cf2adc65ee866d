import logging
import os

from gestao import models  # noqa: F401
from gestao.auth import get_password_hash
from gestao.database import SessionLocal
from gestao.models.empresa import Empresa
from gestao.models.usuario import Usuario
from gestao.services.sequencias import garantir_sequencias

logger = logging.getLogger(__name__)


def create_first_user(session_factory=SessionLocal):
    """Cria a empresa padrão e o usuário 'admin' na primeira execução."""
    db = session_factory()

    try:
        empresa = db.query(Empresa).order_by(Empresa.id).first()
        if not empresa:
            empresa = Empresa(nome=os.getenv("EMPRESA_PADRAO", "Academia"), ativa=True)
            db.add(empresa)
            db.flush()
            logger.info(f"Empresa padrão criada (id {empresa.id})")
        garantir_sequencias(db, empresa.id)

        user = db.query(Usuario).filter(Usuario.username == "admin").first()
        if not user:
            logger.info("Criando primeiro usuário administrador...")
            db_user = Usuario(
                empresa_id=empresa.id,
                username="admin",
                email="admin@suaacademia.com.br",
                nome="Admin do Sistema",
                hashed_password=get_password_hash(os.getenv("ADMIN_PASSWORD", "admin")),
                role="administrador"
            )
            db.add(db_user)
            logger.info("Usuário 'admin' criado com sucesso")
        else:
            logger.info("Usuário administrador 'admin' já existe.")
        db.commit()

    except Exception as e:
        logger.error(f"Erro ao criar usuário: {e}")
        db.rollback()
    finally:
        db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
    create_first_user()
