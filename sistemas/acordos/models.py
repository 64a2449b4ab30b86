# sistemas/acordos/models.py
"""
Modelos de dados do módulo de Acordos e Parcelas

- Processo: projeção mínima do processo (pertence ao subsistema de processos)
- Acordo: acordo de pagamento de um processo julgado
- AcordoTransacao / AcordoCompensacao / AcordoDacao: termos financeiros
  específicos de cada formato de acordo (um por acordo)
- ParcelaAcordo: obrigação do cronograma (entrada, principal, honorários)
- PagamentoParcela: pagamento (parcial ou total) de uma parcela, somente inclusão
- LogAuditoria: trilha de auditoria das alterações
"""

from sqlalchemy import (
    Column, Integer, String, Text, Date, DateTime, Numeric, JSON,
    ForeignKey, Index, UniqueConstraint, CheckConstraint, text
)
from sqlalchemy.orm import relationship

from database.connection import Base
from utils.timezone import get_utc_now
from sistemas.acordos.constants import (
    TipoAcordo, StatusAcordo, StatusParcela, MetodoPagamento
)
from sistemas.acordos.valores import ZERO

# Valores monetários: até 13 dígitos inteiros, 2 decimais
Dinheiro = Numeric(15, 2)

_FILTRO_ACORDO_ABERTO = text(
    f"status IN ('{StatusAcordo.ATIVO.value}', '{StatusAcordo.VENCIDO.value}')"
)


class Processo(Base):
    """
    Projeção do processo administrativo usada pelo motor de acordos.

    O cadastro completo pertence ao subsistema de processos; aqui só
    interessam o status e o resultado do julgamento.
    """
    __tablename__ = "processos"

    id = Column(Integer, primary_key=True, index=True)
    numero = Column(String(50), nullable=False, unique=True, index=True)
    status = Column(String(30), nullable=False, index=True)
    # Valores relevantes: julgado, em_cumprimento, concluido, arquivado
    resultado_julgamento = Column(String(30), nullable=True)
    # Valores: deferido, parcialmente_deferido, indeferido

    created_at = Column(DateTime(timezone=True), default=get_utc_now)
    updated_at = Column(DateTime(timezone=True), default=get_utc_now, onupdate=get_utc_now)

    acordos = relationship("Acordo", back_populates="processo")

    def __repr__(self):
        return f"<Processo(id={self.id}, numero='{self.numero}', status='{self.status}')>"


class Acordo(Base):
    """
    Acordo de pagamento criado após julgamento favorável do processo.

    No máximo um acordo aberto (ativo ou vencido) por processo.
    """
    __tablename__ = "acordos"

    id = Column(Integer, primary_key=True, index=True)

    processo_id = Column(Integer, ForeignKey("processos.id"), nullable=False, index=True)
    processo = relationship("Processo", back_populates="acordos")

    tipo = Column(String(30), nullable=False)
    # Valores: compensacao, dacao_pagamento, transacao_excepcional

    # Número do termo: NNNN/AAAA, sequencial por ano
    ano_termo = Column(Integer, nullable=False)
    sequencial_termo = Column(Integer, nullable=False)
    numero_termo = Column(String(20), nullable=False, unique=True, index=True)

    data_assinatura = Column(Date, nullable=False)
    data_vencimento = Column(Date, nullable=False)

    status = Column(String(20), nullable=False, default=StatusAcordo.ATIVO.value, index=True)
    # Valores: ativo, vencido, cumprido, cancelado

    observacoes = Column(Text, nullable=True)
    clausulas_especiais = Column(Text, nullable=True)

    motivo_cancelamento = Column(Text, nullable=True)
    cancelado_em = Column(DateTime(timezone=True), nullable=True)
    cumprido_em = Column(DateTime(timezone=True), nullable=True)

    created_by = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), default=get_utc_now)
    updated_at = Column(DateTime(timezone=True), default=get_utc_now, onupdate=get_utc_now)

    # Termos financeiros (apenas um é preenchido, conforme o tipo)
    transacao = relationship("AcordoTransacao", back_populates="acordo", uselist=False, cascade="all, delete-orphan")
    compensacao = relationship("AcordoCompensacao", back_populates="acordo", uselist=False, cascade="all, delete-orphan")
    dacao = relationship("AcordoDacao", back_populates="acordo", uselist=False, cascade="all, delete-orphan")

    parcelas = relationship(
        "ParcelaAcordo",
        back_populates="acordo",
        cascade="all, delete-orphan",
        order_by="[ParcelaAcordo.data_vencimento, ParcelaAcordo.id]",
    )

    __table_args__ = (
        UniqueConstraint("ano_termo", "sequencial_termo", name="uq_acordos_termo_ano_seq"),
        CheckConstraint("data_vencimento > data_assinatura", name="ck_acordos_vencimento_apos_assinatura"),
        Index(
            "uq_acordos_aberto_por_processo",
            "processo_id",
            unique=True,
            sqlite_where=_FILTRO_ACORDO_ABERTO,
            postgresql_where=_FILTRO_ACORDO_ABERTO,
        ),
    )

    @property
    def termos(self):
        """Sub-registro de termos financeiros do tipo do acordo."""
        return {
            TipoAcordo.TRANSACAO_EXCEPCIONAL.value: self.transacao,
            TipoAcordo.COMPENSACAO.value: self.compensacao,
            TipoAcordo.DACAO_PAGAMENTO.value: self.dacao,
        }.get(self.tipo)

    @property
    def aberto(self) -> bool:
        return self.status in (StatusAcordo.ATIVO.value, StatusAcordo.VENCIDO.value)

    @property
    def possui_pagamentos(self) -> bool:
        return any(parcela.pagamentos for parcela in self.parcelas)

    def __repr__(self):
        return f"<Acordo(id={self.id}, termo='{self.numero_termo}', status='{self.status}')>"


class HonorariosCustasMixin:
    """Honorários e custas, comuns aos três formatos de acordo."""

    honorarios_valor = Column(Dinheiro, nullable=True)
    honorarios_metodo_pagamento = Column(String(20), nullable=True)  # avista, parcelado
    honorarios_parcelas = Column(Integer, nullable=True)

    # Custas: obrigação única, fora do cronograma de parcelas
    custas_valor = Column(Dinheiro, nullable=True)
    custas_data_vencimento = Column(Date, nullable=True)
    custas_data_pagamento = Column(Date, nullable=True)

    @property
    def possui_custas(self) -> bool:
        return self.custas_valor is not None and self.custas_valor > ZERO

    @property
    def custas_quitadas(self) -> bool:
        return not self.possui_custas or self.custas_data_pagamento is not None


class AcordoTransacao(HonorariosCustasMixin, Base):
    """Termos da transação excepcional (pagamento à vista ou parcelado)."""
    __tablename__ = "acordos_transacao"

    id = Column(Integer, primary_key=True, index=True)
    acordo_id = Column(Integer, ForeignKey("acordos.id"), nullable=False, unique=True, index=True)
    acordo = relationship("Acordo", back_populates="transacao")

    valor_total_proposto = Column(Dinheiro, nullable=False)
    metodo_pagamento = Column(String(20), nullable=False, default=MetodoPagamento.AVISTA.value)
    valor_entrada = Column(Dinheiro, nullable=False, default=ZERO)
    quantidade_parcelas = Column(Integer, nullable=False, default=1)
    valor_parcela = Column(Dinheiro, nullable=True)  # parcela regular calculada

    def __repr__(self):
        return f"<AcordoTransacao(acordo_id={self.acordo_id}, proposto={self.valor_total_proposto})>"


class AcordoCompensacao(HonorariosCustasMixin, Base):
    """Termos da compensação de créditos contra débitos inscritos."""
    __tablename__ = "acordos_compensacao"

    id = Column(Integer, primary_key=True, index=True)
    acordo_id = Column(Integer, ForeignKey("acordos.id"), nullable=False, unique=True, index=True)
    acordo = relationship("Acordo", back_populates="compensacao")

    valor_total_creditos = Column(Dinheiro, nullable=False)
    valor_total_debitos = Column(Dinheiro, nullable=False)
    valor_liquido = Column(Dinheiro, nullable=False)

    # Data em que a compensação foi efetivada (quita o principal)
    data_efetivacao = Column(Date, nullable=True)

    def __repr__(self):
        return f"<AcordoCompensacao(acordo_id={self.acordo_id}, liquido={self.valor_liquido})>"


class AcordoDacao(HonorariosCustasMixin, Base):
    """Termos da dação em pagamento (imóveis oferecidos contra débitos)."""
    __tablename__ = "acordos_dacao"

    id = Column(Integer, primary_key=True, index=True)
    acordo_id = Column(Integer, ForeignKey("acordos.id"), nullable=False, unique=True, index=True)
    acordo = relationship("Acordo", back_populates="dacao")

    valor_total_oferecido = Column(Dinheiro, nullable=False)
    valor_total_compensar = Column(Dinheiro, nullable=False)
    valor_liquido = Column(Dinheiro, nullable=False)

    # Data em que a transferência dos bens foi efetivada (quita o principal)
    data_efetivacao = Column(Date, nullable=True)

    def __repr__(self):
        return f"<AcordoDacao(acordo_id={self.acordo_id}, liquido={self.valor_liquido})>"


class ParcelaAcordo(Base):
    """
    Parcela do cronograma de um acordo.

    Numeração: entrada = 0; principal e honorários = 1..N dentro da categoria.
    `versao` é incrementada a cada alteração (controle de concorrência otimista).
    """
    __tablename__ = "parcelas_acordo"

    id = Column(Integer, primary_key=True, index=True)

    acordo_id = Column(Integer, ForeignKey("acordos.id"), nullable=False, index=True)
    acordo = relationship("Acordo", back_populates="parcelas")

    tipo_parcela = Column(String(20), nullable=False)
    # Valores: entrada, principal, honorarios
    numero = Column(Integer, nullable=False)

    valor = Column(Dinheiro, nullable=False)
    valor_pago = Column(Dinheiro, nullable=False, default=ZERO)
    data_vencimento = Column(Date, nullable=False, index=True)
    data_pagamento = Column(Date, nullable=True)  # data do pagamento que quitou a parcela

    status = Column(String(20), nullable=False, default=StatusParcela.PENDENTE.value, index=True)
    # Valores: pendente, paga, vencida, cancelada

    versao = Column(Integer, nullable=False)

    created_at = Column(DateTime(timezone=True), default=get_utc_now)
    updated_at = Column(DateTime(timezone=True), default=get_utc_now, onupdate=get_utc_now)

    pagamentos = relationship(
        "PagamentoParcela",
        back_populates="parcela",
        cascade="all, delete-orphan",
        order_by="PagamentoParcela.id",
    )

    __mapper_args__ = {"version_id_col": versao}

    __table_args__ = (
        UniqueConstraint("acordo_id", "tipo_parcela", "numero", name="uq_parcelas_acordo_tipo_numero"),
        CheckConstraint("valor > 0", name="ck_parcelas_valor_positivo"),
        CheckConstraint("valor_pago >= 0 AND valor_pago <= valor", name="ck_parcelas_valor_pago_limite"),
        Index("ix_parcelas_status_vencimento", "status", "data_vencimento"),
    )

    @property
    def valor_restante(self):
        return self.valor - (self.valor_pago or ZERO)

    def __repr__(self):
        return (
            f"<ParcelaAcordo(id={self.id}, tipo='{self.tipo_parcela}', numero={self.numero}, "
            f"valor={self.valor}, status='{self.status}')>"
        )


class PagamentoParcela(Base):
    """
    Pagamento registrado contra uma parcela.

    Somente inclusão: pagamentos não são editados nem excluídos. Correções
    são feitas cancelando o acordo.
    """
    __tablename__ = "pagamentos_parcela"

    id = Column(Integer, primary_key=True, index=True)

    parcela_id = Column(Integer, ForeignKey("parcelas_acordo.id"), nullable=False, index=True)
    parcela = relationship("ParcelaAcordo", back_populates="pagamentos")

    valor_pago = Column(Dinheiro, nullable=False)
    data_pagamento = Column(Date, nullable=False)
    forma_pagamento = Column(String(20), nullable=False)
    numero_comprovante = Column(String(100), nullable=True)
    observacoes = Column(Text, nullable=True)

    registrado_por = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), default=get_utc_now)

    __table_args__ = (
        CheckConstraint("valor_pago > 0", name="ck_pagamentos_valor_positivo"),
    )

    def __repr__(self):
        return f"<PagamentoParcela(id={self.id}, parcela_id={self.parcela_id}, valor={self.valor_pago})>"


class LogAuditoria(Base):
    """Registro de auditoria: uma linha por alteração lógica."""
    __tablename__ = "logs_auditoria"

    id = Column(Integer, primary_key=True, index=True)
    acao = Column(String(50), nullable=False, index=True)
    entidade = Column(String(50), nullable=False)
    entidade_id = Column(String(50), nullable=False)
    dados_anteriores = Column(JSON, nullable=True)
    dados_novos = Column(JSON, nullable=True)
    usuario_id = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), default=get_utc_now, index=True)

    __table_args__ = (
        Index("ix_logs_auditoria_entidade", "entidade", "entidade_id"),
    )

    def __repr__(self):
        return f"<LogAuditoria(id={self.id}, acao='{self.acao}', entidade='{self.entidade}:{self.entidade_id}')>"
