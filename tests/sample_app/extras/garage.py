from blueprint_ioc import component, component_constructor, singleton

from sample_app.vehicles import FordCar, Vehicle


@component
@singleton
class Garage:
    @component_constructor
    def __init__(self, car: FordCar):
        self.vehicles = [car]

    def parked(self) -> list:
        return [v for v in self.vehicles if isinstance(v, Vehicle)]
