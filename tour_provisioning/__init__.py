"""Top-level package for tour provisioning.

Expands a single tour entered by a production crew (title, colors,
departments and a list of dates and venues) into the records the
scheduling console works with: the tour, an umbrella job spanning it,
one tour date and job per date, venues and department links.

Typical use:

    from tour_provisioning.container import get_container
    from tour_provisioning.services import TourProvisioningService

    service = get_container().resolve(TourProvisioningService)
    tour = service.provision_tour(
        "Summer Run", "", None, ["sound", "lights"],
        [("2024-07-10", "Venue A"), ("2024-07-08", "Venue B")],
    )
"""
