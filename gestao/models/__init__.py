# Importa todos os modelos para que o SQLAlchemy resolva os relacionamentos por nome
from gestao.models import (  # noqa: F401
    empresa, usuario, aluno, funcionario, turma, plano, desconto,
    matricula, historico_matricula, contas, caixa, sequencia,
)
