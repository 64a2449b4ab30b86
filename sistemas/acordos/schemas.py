# sistemas/acordos/schemas.py
"""
Schemas Pydantic para entrada e saída do motor de Acordos e Parcelas

Os termos financeiros são uma união discriminada pelo campo `tipo`:
- transacao_excepcional: à vista ou parcelado (com entrada opcional)
- compensacao: créditos contra débitos
- dacao_pagamento: bens oferecidos contra débitos
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator

from sistemas.acordos.constants import MetodoPagamento, FormaPagamento


# ==========================================
# Termos financeiros
# ==========================================

class HonorariosTermos(BaseModel):
    """Honorários advocatícios do acordo"""
    valor: Decimal = Decimal("0")
    metodo_pagamento: MetodoPagamento = MetodoPagamento.AVISTA
    parcelas: Optional[int] = Field(None, description="Quantidade de parcelas (se parcelado)")


class CustasTermos(BaseModel):
    """Custas processuais: obrigação única, fora do cronograma"""
    valor: Decimal
    data_vencimento: Optional[date] = None


class TermosTransacao(BaseModel):
    tipo: Literal["transacao_excepcional"] = "transacao_excepcional"
    valor_total_proposto: Decimal
    metodo_pagamento: MetodoPagamento
    valor_entrada: Decimal = Decimal("0")
    quantidade_parcelas: int = 1
    honorarios: Optional[HonorariosTermos] = None
    custas: Optional[CustasTermos] = None


class TermosCompensacao(BaseModel):
    tipo: Literal["compensacao"] = "compensacao"
    valor_total_creditos: Decimal
    valor_total_debitos: Decimal
    valor_liquido: Optional[Decimal] = Field(None, description="Se omitido: créditos - débitos")
    honorarios: Optional[HonorariosTermos] = None
    custas: Optional[CustasTermos] = None


class TermosDacao(BaseModel):
    tipo: Literal["dacao_pagamento"] = "dacao_pagamento"
    valor_total_oferecido: Decimal
    valor_total_compensar: Decimal
    valor_liquido: Optional[Decimal] = Field(None, description="Se omitido: oferecido - compensar")
    honorarios: Optional[HonorariosTermos] = None
    custas: Optional[CustasTermos] = None


TermosAcordo = Annotated[
    Union[TermosTransacao, TermosCompensacao, TermosDacao],
    Field(discriminator="tipo"),
]


# ==========================================
# Requests
# ==========================================

class AcordoCreate(BaseModel):
    """Criação de acordo para um processo julgado"""
    processo_id: int
    data_assinatura: date
    data_vencimento: date
    termos: TermosAcordo
    observacoes: Optional[str] = None
    clausulas_especiais: Optional[str] = None


class PagamentoCreate(BaseModel):
    """Registro de pagamento (parcial ou total) de uma parcela"""
    valor: Decimal
    data_pagamento: date
    forma_pagamento: FormaPagamento
    numero_comprovante: Optional[str] = Field(None, max_length=100)
    observacoes: Optional[str] = Field(None, max_length=5000)

    @field_validator("numero_comprovante")
    @classmethod
    def limpar_comprovante(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


# ==========================================
# Responses
# ==========================================

class ParcelaOut(BaseModel):
    id: int
    tipo_parcela: str
    numero: int
    valor: Decimal
    valor_pago: Decimal
    data_vencimento: date
    data_pagamento: Optional[date] = None
    status: str
    versao: int

    model_config = {"from_attributes": True}


class AcordoOut(BaseModel):
    id: int
    processo_id: int
    tipo: str
    numero_termo: str
    data_assinatura: date
    data_vencimento: date
    status: str
    observacoes: Optional[str] = None
    clausulas_especiais: Optional[str] = None
    motivo_cancelamento: Optional[str] = None
    cancelado_em: Optional[datetime] = None
    cumprido_em: Optional[datetime] = None
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None
    termos: Dict[str, Any] = {}
    parcelas: List[ParcelaOut] = []

    model_config = {"from_attributes": True}


class PagamentoOut(BaseModel):
    id: int
    parcela_id: int
    valor_pago: Decimal
    data_pagamento: date
    forma_pagamento: str
    numero_comprovante: Optional[str] = None
    observacoes: Optional[str] = None
    registrado_por: Optional[int] = None
    created_at: Optional[datetime] = None

    # Situação após o pagamento
    parcela: ParcelaOut
    parcela_quitada: bool
    acordo_status: str


class StatusAcordoOut(BaseModel):
    """Visão consolidada do acordo em uma data"""
    acordo_id: int
    numero_termo: str
    status: str
    status_derivado: str = Field(..., description="Status recalculado para a data de hoje")
    valor_total: Decimal
    valor_pago: Decimal
    valor_restante: Decimal
    percentual_pago: Decimal
    total_parcelas: int
    parcelas_por_status: Dict[str, int]
    proxima_parcela: Optional[ParcelaOut] = None
    obrigacoes_avulsas_quitadas: bool


class ParcelaVencidaRelatorio(BaseModel):
    """Linha do relatório de parcelas vencidas"""
    parcela_id: int
    acordo_id: int
    numero_termo: str
    processo_numero: Optional[str] = None
    tipo_parcela: str
    numero: int
    data_vencimento: date
    valor: Decimal
    valor_pago: Decimal
    valor_restante: Decimal
    dias_atraso: int
    valor_multa: Decimal
    valor_juros: Decimal
    valor_atualizado: Decimal
