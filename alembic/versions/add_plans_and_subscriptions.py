"""Add plans and subscriptions tables and seed the four plans

Revision ID: plans_001
Revises: storefront_001
Create Date: 2026-09-28 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB


# revision identifiers, used by Alembic.
revision = 'plans_001'
down_revision = 'storefront_001'
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('plans',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('slug', sa.String(length=100), nullable=False),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('max_products', sa.Integer(), nullable=True),
        sa.Column('max_orders', sa.Integer(), nullable=True),
        sa.Column('features', JSONB, nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('created_at', sa.DateTime(), nullable=True, server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_plans_id'), 'plans', ['id'], unique=False)
    op.create_index(op.f('ix_plans_slug'), 'plans', ['slug'], unique=True)
    op.create_index(op.f('ix_plans_is_active'), 'plans', ['is_active'], unique=False)

    op.create_table('subscriptions',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('plan_id', sa.String(), nullable=False),
        sa.Column('status', sa.Enum('ACTIVE', 'CANCELED', 'EXPIRED', 'PAST_DUE', name='subscriptionstatus'), nullable=False),
        sa.Column('current_period_start', sa.DateTime(), nullable=True),
        sa.Column('current_period_end', sa.DateTime(), nullable=True),
        sa.Column('cancel_at_period_end', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['plan_id'], ['plans.id'], ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_subscriptions_id'), 'subscriptions', ['id'], unique=False)
    op.create_index(op.f('ix_subscriptions_user_id'), 'subscriptions', ['user_id'], unique=False)
    op.create_index(op.f('ix_subscriptions_plan_id'), 'subscriptions', ['plan_id'], unique=False)
    op.create_index(op.f('ix_subscriptions_status'), 'subscriptions', ['status'], unique=False)
    op.create_index(op.f('ix_subscriptions_created_at'), 'subscriptions', ['created_at'], unique=False)

    op.execute("""
        INSERT INTO plans (id, name, slug, price, max_products, max_orders, features, is_active, created_at)
        VALUES
        (gen_random_uuid()::text, 'Grátis', 'gratis', 0.00, 5, 10,
         '["Até 5 produtos", "Até 10 pedidos/mês", "Loja básica", "Suporte por email"]'::jsonb, true, now()),
        (gen_random_uuid()::text, 'Básico', 'basico', 29.90, 50, 100,
         '["Até 50 produtos", "Até 100 pedidos/mês", "Personalização de cores", "Cupons de desconto", "Suporte prioritário"]'::jsonb, true, now()),
        (gen_random_uuid()::text, 'Profissional', 'profissional', 79.90, 200, NULL,
         '["Até 200 produtos", "Pedidos ilimitados", "Personalização completa", "Cupons ilimitados", "Análises avançadas", "Suporte VIP"]'::jsonb, true, now()),
        (gen_random_uuid()::text, 'Enterprise', 'enterprise', 199.90, NULL, NULL,
         '["Produtos ilimitados", "Pedidos ilimitados", "Todas as funcionalidades", "API personalizada", "Suporte dedicado 24/7"]'::jsonb, true, now())
    """)


def downgrade():
    op.drop_index(op.f('ix_subscriptions_created_at'), table_name='subscriptions')
    op.drop_index(op.f('ix_subscriptions_status'), table_name='subscriptions')
    op.drop_index(op.f('ix_subscriptions_plan_id'), table_name='subscriptions')
    op.drop_index(op.f('ix_subscriptions_user_id'), table_name='subscriptions')
    op.drop_index(op.f('ix_subscriptions_id'), table_name='subscriptions')
    op.drop_table('subscriptions')
    sa.Enum(name='subscriptionstatus').drop(op.get_bind(), checkfirst=True)

    op.drop_index(op.f('ix_plans_is_active'), table_name='plans')
    op.drop_index(op.f('ix_plans_slug'), table_name='plans')
    op.drop_index(op.f('ix_plans_id'), table_name='plans')
    op.drop_table('plans')
