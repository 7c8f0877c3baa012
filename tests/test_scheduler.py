from colts_league.core.scheduler import start_scheduler


def test_nightly_recalculation_job_is_registered():
    scheduler = start_scheduler(hour=3, minute=30)
    try:
        job = scheduler.get_job("nightly_standings")
        assert job is not None
        assert "hour='3'" in str(job.trigger)
        assert "minute='30'" in str(job.trigger)
    finally:
        scheduler.shutdown(wait=False)
