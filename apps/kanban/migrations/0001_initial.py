import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='ItemKanban',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('item_id', models.CharField(max_length=64)),
                ('item_tipo', models.CharField(choices=[('demanda', 'Demanda'), ('tarefa', 'Tarefa'), ('rota', 'Rota')], max_length=10)),
                ('titulo', models.CharField(blank=True, max_length=255)),
                ('kanban_type', models.CharField(db_index=True, help_text='Id do usuário dono do kanban ou nome do kanban compartilhado', max_length=100)),
                ('posicao', models.CharField(choices=[('a_fazer', 'A Fazer'), ('em_progresso', 'Em Progresso'), ('feito', 'Feito')], default='a_fazer', max_length=20)),
                ('ordem', models.IntegerField(default=0)),
                ('criado_em', models.DateTimeField(auto_now_add=True)),
                ('atualizado_em', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'kanban_item',
                'ordering': ['posicao', 'ordem', 'criado_em'],
            },
        ),
        migrations.AddConstraint(
            model_name='itemkanban',
            constraint=models.UniqueConstraint(fields=('item_id', 'item_tipo', 'kanban_type'), name='kanban_item_unico_por_kanban'),
        ),
        migrations.CreateModel(
            name='HistoricoKanban',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('item_id', models.CharField(max_length=64)),
                ('item_tipo', models.CharField(choices=[('demanda', 'Demanda'), ('tarefa', 'Tarefa'), ('rota', 'Rota')], max_length=10)),
                ('item_titulo', models.CharField(blank=True, max_length=255)),
                ('kanban_type', models.CharField(max_length=100)),
                ('posicao_anterior', models.CharField(blank=True, max_length=20, null=True)),
                ('posicao_nova', models.CharField(blank=True, max_length=20, null=True)),
                ('acao', models.CharField(choices=[('adicionado', 'Adicionado'), ('movido', 'Movido'), ('removido', 'Removido')], max_length=10)),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('movido_por', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='movimentacoes_kanban', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'kanban_historico',
                'ordering': ['created_at', 'id'],
                'indexes': [models.Index(fields=['kanban_type', 'created_at'], name='idx_historico_kanban_data')],
            },
        ),
    ]
