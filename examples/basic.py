"""Basic usage example."""

from mfc import ScheduleSpec, get_manager


def main():
    manager = get_manager()

    # Register a backup every 30 minutes and once at startup
    spec = ScheduleSpec.parse("every:30m")
    entries = manager.add_task("/usr/bin/backup.sh", spec, on_startup=True)
    print("Registered:")
    for entry in entries:
        print(f"  - {entry}")

    # Show what the native scheduler now holds
    result = manager.list_parsed()
    print(f"\nTotal tasks: {len(result.tasks)}")
    print(manager.render(result.tasks))

    for warning in result.warnings:
        print(f"skipped: {warning}")


if __name__ == "__main__":
    main()
