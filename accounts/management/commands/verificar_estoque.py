from django.core.management.base import BaseCommand
from django.utils import timezone

from accounts.models import Mercado, Produto
from relatorios.analytics import produtos_vencendo, DIAS_ALERTA_VALIDADE


class Command(BaseCommand):
    help = 'Lista, por mercado, os produtos com estoque baixo e os vencidos ou perto de vencer'

    def add_arguments(self, parser):
        parser.add_argument('--mercado', type=int, help='Verifica apenas o mercado com este ID')
        parser.add_argument('--dias', type=int, default=DIAS_ALERTA_VALIDADE,
                            help='Janela (em dias) para o alerta de validade')

    def handle(self, *args, **options):
        hoje = timezone.localdate()
        mercados = Mercado.objects.all().order_by('id')
        if options.get('mercado'):
            mercados = mercados.filter(id=options['mercado'])

        total_alertas = 0
        for mercado in mercados:
            baixo = Produto.objects.filter(mercado=mercado, estoque__lte=mercado.limite_estoque_baixo)
            vencendo = produtos_vencendo(
                Produto.objects.filter(mercado=mercado, data_validade__isnull=False),
                hoje=hoje, dias=options['dias']
            )
            if not baixo and not vencendo:
                continue

            self.stdout.write(self.style.MIGRATE_HEADING(f"{mercado.nome} (ID {mercado.id})"))
            for produto in baixo:
                self.stdout.write(self.style.WARNING(
                    f"  Estoque baixo: {produto.nome} ({produto.estoque} un.)"
                ))
            for r in vencendo:
                estilo = self.style.ERROR if r['situacao'] == 'vencido' else self.style.WARNING
                self.stdout.write(estilo(
                    f"  Validade: {r['produto'].nome} - {r['produto'].data_validade.strftime('%d/%m/%Y')} ({r['situacao']})"
                ))
            total_alertas += len(baixo) + len(vencendo)

        if total_alertas:
            self.stdout.write(self.style.SUCCESS(f'Verificação concluída: {total_alertas} alertas encontrados.'))
        else:
            self.stdout.write(self.style.SUCCESS('Nenhum alerta de estoque ou validade encontrado.'))
