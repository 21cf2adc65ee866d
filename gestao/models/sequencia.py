from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint

from gestao.database import Base


class Sequencia(Base):
    """Contador por empresa e série (CX, CR, CP, M, P) usado na numeração sequencial."""
    __tablename__ = "sequencias"
    __table_args__ = (UniqueConstraint("empresa_id", "serie", name="uq_sequencia_empresa_serie"),)

    id = Column(Integer, primary_key=True)
    empresa_id = Column(Integer, ForeignKey("empresas.id"), nullable=False)
    serie = Column(String(10), nullable=False)
    valor = Column(Integer, nullable=False, default=0)
