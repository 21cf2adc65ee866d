from sqlalchemy import Column, Integer, String, Date, DateTime, Boolean, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import relationship

from gestao.database import Base


class Aluno(Base):
    __tablename__ = "alunos"
    __table_args__ = (UniqueConstraint("empresa_id", "cpf", name="uq_aluno_cpf_empresa"),)

    id = Column(Integer, primary_key=True, index=True)
    empresa_id = Column(Integer, ForeignKey("empresas.id"), nullable=False, index=True)

    nome = Column(String(100), nullable=False, index=True)
    data_nascimento = Column(Date, nullable=True)
    cpf = Column(String(14), nullable=True, index=True)
    telefone = Column(String(20), nullable=True)
    email = Column(String(100), nullable=True)
    endereco = Column(String(255), nullable=True)
    observacoes = Column(String(255), nullable=True)
    ativo = Column(Boolean, default=True, nullable=False)
    data_cadastro = Column(DateTime, server_default=func.now())

    matriculas = relationship("Matricula", back_populates="aluno")
    contas_receber = relationship("ContaReceber", back_populates="aluno")
