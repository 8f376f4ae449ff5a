"""
CLI интерфейс для интерпретатора строк заказа (интерактивный режим)
"""
import argparse
import json
import sys

from apps.order_parser.config import config, validate_config
from apps.order_parser.services.command_formatter import CommandFormatter
from apps.order_parser.services.command_interpreter import CommandInterpreter
from apps.order_parser.utils.error_handler import ErrorHandler
from apps.order_parser.utils.logger_utils import configure_logging, log_event


def print_json(data: dict):
    """Печатает данные в формате JSON"""
    print(json.dumps(data, ensure_ascii=False, indent=2))
    print()  # Пустая строка для разделения


def process_input(interpreter: CommandInterpreter, user_input: str, phrase_id: str = None):
    """
    Обрабатывает введенную пользователем строку заказа

    Args:
        interpreter: Интерпретатор команд
        user_input: Введенная строка ("papa 2 kilos")
        phrase_id: Номер строки для логов

    Returns:
        True если строка была распознана
    """
    user_input = user_input.strip()

    if not user_input:
        return False

    # Команды выхода
    if user_input.lower() in ('exit', 'quit', 'q', 'salir'):
        print("Saliendo...")
        sys.exit(0)

    # Команды помощи
    if user_input.lower() in ('help', 'h', 'ayuda'):
        print_help()
        return True

    result = interpreter.interpret(user_input)
    log_event(
        "order_line_processed",
        phrase_id=phrase_id,
        max_length=config.LOG_PHRASE_MAX_LENGTH,
        phrase=user_input,
        ok=result.ok,
        shape=result.command.shape.value if result.ok else None,
        failure_kind=None if result.ok else result.failure.kind.value,
    )
    print_json(result.to_dict())

    if result.ok:
        print(f"✓ {CommandFormatter.to_canonical_text(result.command)}\n")
    else:
        print(ErrorHandler.get_user_message_for_parse_failure(result.failure), file=sys.stderr)
        print()
    return result.ok


def print_help():
    """Выводит справку"""
    print("""
Comandos disponibles:
  - Escribe una línea de pedido para interpretarla
  - help, h, ayuda - mostrar esta ayuda
  - exit, quit, q, salir - salir

Ejemplos:
  papa 2 kilos
  dos kilos y medio de papa
  papa 3 soles con 50
  papa a dos soles con cincuenta
    """)


def main(argv=None):
    """Главная функция: разбор аргументов или интерактивный режим"""
    parser = argparse.ArgumentParser(description="Interpreta líneas de pedido en español")
    parser.add_argument("phrases", nargs="*", help="Líneas a interpretar (sin argumentos: modo interactivo)")
    parser.add_argument("--strict-units", action="store_true", help="Fallar si se combinan unidades distintas")
    args = parser.parse_args(argv)

    validate_config()
    configure_logging(config.LOG_LEVEL)
    interpreter = CommandInterpreter(strict_unit_combination=args.strict_units or None)

    if args.phrases:
        results = [
            process_input(interpreter, phrase, phrase_id=str(index))
            for index, phrase in enumerate(args.phrases, start=1)
        ]
        return 0 if all(results) else 1

    print("=" * 60)
    print("Intérprete de líneas de pedido")
    print("=" * 60)
    print("\nEscribe una línea como 'papa 2 kilos'")
    print("Para ayuda escribe 'help', para salir 'exit'\n")

    line_number = 0
    try:
        while True:
            try:
                user_input = input("pedido > ").strip()
                if user_input:
                    line_number += 1
                    process_input(interpreter, user_input, phrase_id=str(line_number))
            except EOFError:
                # Ctrl+Z на Windows или Ctrl+D на Unix
                print("\n\nSaliendo...")
                break
            except KeyboardInterrupt:
                # Ctrl+C
                print("\n\nSaliendo...")
                break

    except Exception as e:
        print(f"\n❌ Error crítico: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
