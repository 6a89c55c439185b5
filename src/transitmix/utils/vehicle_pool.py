from transitmix.core_types import FleetPlan, Vehicle


def create_vehicle_pool(
    fleet_plan: FleetPlan, available_from: float = 0.0, start_index: int = 1
) -> list[Vehicle]:
    """
    Instantiate one vehicle per unit of the fleet plan, parked at the depot.

    Ids encode the class and a per-class sequence number, e.g. ``MINIBUS_001``.
    """
    vehicles: list[Vehicle] = []

    for class_name, count in fleet_plan.counts.items():
        vehicle_class = fleet_plan.vehicle_classes[class_name]
        prefix = class_name.upper()
        for seq in range(start_index, start_index + count):
            vehicles.append(
                Vehicle(
                    vehicle_id=f"{prefix}_{seq:03d}",
                    vehicle_class=vehicle_class,
                    available_from=available_from,
                    location=None,
                )
            )

    return vehicles
