# -*- coding: utf-8 -*-
"""
Schemas Pydantic para contas a receber e a pagar.

Valores monetários entram como Decimal; as regras de negócio (valor positivo,
desconto, forma de pagamento...) são validadas nos serviços.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel

from gestao.models.enums import CategoriaContaPagar, FormaPagamento, StatusConta


class PagamentoCreate(BaseModel):
    valor_pago: Decimal
    forma_pagamento: str
    data_pagamento: Optional[date] = None
    valor_juros: Decimal = Decimal("0")
    valor_multa: Decimal = Decimal("0")


class CancelamentoRequest(BaseModel):
    motivo: str


class ContaRead(BaseModel):
    id: int
    numero: str
    descricao: Optional[str] = None
    valor_original: float
    valor_desconto: float
    valor_juros: float
    valor_multa: float
    valor_final: float
    valor_pago: float
    valor_restante: float
    data_vencimento: date
    data_pagamento: Optional[date] = None
    forma_pagamento: Optional[FormaPagamento] = None
    status: StatusConta
    numero_parcela: Optional[int] = None
    total_parcelas: Optional[int] = None
    observacoes: Optional[str] = None
    criado_em: Optional[datetime] = None

    class Config:
        from_attributes = True


# --- Contas a receber ---

class ContaReceberCreate(BaseModel):
    aluno_id: int
    data_vencimento: date
    valor_original: Optional[Decimal] = None   # opcional quando o plano é informado
    valor_desconto: Optional[Decimal] = None
    plano_id: Optional[int] = None
    desconto_id: Optional[int] = None
    descricao: Optional[str] = None
    categoria: str = "MENSALIDADE"
    observacoes: Optional[str] = None


class ContaReceberUpdate(BaseModel):
    aluno_id: Optional[int] = None
    descricao: Optional[str] = None
    categoria: Optional[str] = None
    valor_original: Optional[Decimal] = None
    valor_desconto: Optional[Decimal] = None
    data_vencimento: Optional[date] = None
    observacoes: Optional[str] = None


class ContaReceberRead(ContaRead):
    categoria: str
    aluno_id: int
    plano_id: Optional[int] = None
    desconto_id: Optional[int] = None
    matricula_id: Optional[int] = None
    competencia: Optional[str] = None


class ContaReceberPaginated(BaseModel):
    total: int
    contas: List[ContaReceberRead]


# --- Contas a pagar ---

class ContaPagarCreate(BaseModel):
    categoria: str
    descricao: str
    valor_original: Decimal
    valor_desconto: Decimal = Decimal("0")
    data_vencimento: date
    fornecedor_nome: Optional[str] = None
    fornecedor_doc: Optional[str] = None
    funcionario_id: Optional[int] = None
    documento: Optional[str] = None
    observacoes: Optional[str] = None


class ContaPagarParcelada(BaseModel):
    total_parcelas: int
    valor_total: Decimal
    data_vencimento_primeira: date
    categoria: str
    descricao: str
    fornecedor_nome: Optional[str] = None
    fornecedor_doc: Optional[str] = None
    funcionario_id: Optional[int] = None
    documento: Optional[str] = None
    observacoes: Optional[str] = None


class ContaPagarUpdate(BaseModel):
    categoria: Optional[str] = None
    descricao: Optional[str] = None
    valor_original: Optional[Decimal] = None
    valor_desconto: Optional[Decimal] = None
    data_vencimento: Optional[date] = None
    fornecedor_nome: Optional[str] = None
    fornecedor_doc: Optional[str] = None
    funcionario_id: Optional[int] = None
    documento: Optional[str] = None
    observacoes: Optional[str] = None


class ContaPagarRead(ContaRead):
    categoria: CategoriaContaPagar
    fornecedor_nome: Optional[str] = None
    fornecedor_doc: Optional[str] = None
    funcionario_id: Optional[int] = None
    documento: Optional[str] = None


class ContaPagarPaginated(BaseModel):
    total: int
    contas: List[ContaPagarRead]


class TotalCategoria(BaseModel):
    categoria: CategoriaContaPagar
    total: float
    quantidade: int


class RelatorioTotaisCategoria(BaseModel):
    categorias: List[TotalCategoria]
    total_geral: float
