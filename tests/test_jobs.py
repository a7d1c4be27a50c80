"""
Test suite for job-related endpoints.

Tests cover:
- Job creation and validation
- Job retrieval, update and deletion
- Search, suggestions, locations and analytics views
- Health checks
"""

from datetime import date, timedelta

import pytest


class TestJobCreation:
    """Tests for job creation endpoint"""

    def test_create_job_success(self, client, sample_job_data):
        """Test successful job creation"""
        response = client.post("/api/jobs/", json=sample_job_data)

        assert response.status_code == 201
        data = response.json()
        assert isinstance(data["id"], int)
        assert "created" in data["message"].lower()

    def test_created_job_is_dated_today(self, client, sample_job_data):
        """Test that the server assigns today's date as posted_date"""
        job_id = client.post("/api/jobs/", json=sample_job_data).json()["id"]

        data = client.get(f"/api/jobs/{job_id}").json()
        assert data["posted_date"] == date.today().isoformat()
        assert data["salary"] == 16.5

    def test_salary_as_numeric_string(self, client, sample_job_data):
        """Test that a numeric-looking salary string is coerced"""
        sample_job_data["salary"] = "17.25"
        response = client.post("/api/jobs/", json=sample_job_data)

        assert response.status_code == 201
        job = client.get(f"/api/jobs/{response.json()['id']}").json()
        assert job["salary"] == 17.25

    def test_description_is_optional(self, client, sample_job_data):
        """Test that description defaults to an empty string"""
        del sample_job_data["description"]
        response = client.post("/api/jobs/", json=sample_job_data)

        assert response.status_code == 201
        job = client.get(f"/api/jobs/{response.json()['id']}").json()
        assert job["description"] == ""

    @pytest.mark.parametrize("field", ["title", "employer", "location", "salary"])
    def test_create_job_missing_required_field(self, client, sample_job_data, field):
        """Test job creation with a missing required field"""
        del sample_job_data[field]
        response = client.post("/api/jobs/", json=sample_job_data)

        assert response.status_code == 422

    @pytest.mark.parametrize("value", ["", "   "])
    def test_create_job_blank_title(self, client, sample_job_data, value):
        """Test that empty and whitespace-only titles are rejected"""
        sample_job_data["title"] = value
        response = client.post("/api/jobs/", json=sample_job_data)

        assert response.status_code == 422

    @pytest.mark.parametrize("salary", [-1, "abc", "inf", 100000000, 1e308])
    def test_create_job_invalid_salary(self, client, sample_job_data, salary):
        """Test that negative, non-numeric, infinite and out-of-range salaries are rejected"""
        sample_job_data["salary"] = salary
        response = client.post("/api/jobs/", json=sample_job_data)

        assert response.status_code == 422


class TestJobRetrieval:
    """Tests for job retrieval endpoints"""

    def test_get_job_by_id(self, client, sample_job_data):
        """Test retrieving a job by ID"""
        job_id = client.post("/api/jobs/", json=sample_job_data).json()["id"]

        response = client.get(f"/api/jobs/{job_id}")

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == job_id
        assert data["title"] == sample_job_data["title"]
        assert data["employer"] == sample_job_data["employer"]

    def test_get_nonexistent_job(self, client):
        """Test retrieving a job that doesn't exist"""
        response = client.get("/api/jobs/99999")

        assert response.status_code == 404
        assert "not found" in response.json()["detail"].lower()

    def test_list_jobs_empty(self, client):
        """Test listing when the board is empty"""
        response = client.get("/api/jobs/")

        assert response.status_code == 200
        assert response.json() == []

    def test_list_jobs_newest_first(self, client, add_job):
        """Test that jobs are listed by posted_date, most recent first"""
        today = date.today()
        add_job(title="Old", posted_date=today - timedelta(days=5))
        add_job(title="New", posted_date=today)
        add_job(title="Middle", posted_date=today - timedelta(days=2))

        titles = [job["title"] for job in client.get("/api/jobs/").json()]

        assert titles == ["New", "Middle", "Old"]


class TestJobUpdate:
    """Tests for job update endpoint"""

    def test_update_job(self, client, add_job, sample_job_data):
        """Test replacing a job's fields keeps its posted_date"""
        posted = date.today() - timedelta(days=10)
        job = add_job(posted_date=posted)

        response = client.put(f"/api/jobs/{job.id}", json=sample_job_data)

        assert response.status_code == 200
        assert "updated" in response.json()["message"].lower()

        data = client.get(f"/api/jobs/{job.id}").json()
        assert data["title"] == sample_job_data["title"]
        assert data["salary"] == sample_job_data["salary"]
        assert data["posted_date"] == posted.isoformat()

    def test_update_nonexistent_job(self, client, sample_job_data):
        """Test updating a job that doesn't exist"""
        response = client.put("/api/jobs/99999", json=sample_job_data)

        assert response.status_code == 404

    def test_update_requires_all_fields(self, client, add_job):
        """Test that a partial body is rejected"""
        job = add_job()

        response = client.put(f"/api/jobs/{job.id}", json={"title": "Only a title"})

        assert response.status_code == 422

    def test_update_rejects_out_of_range_salary(self, client, add_job, sample_job_data):
        """Test a salary wider than the column is a validation error"""
        job = add_job()
        sample_job_data["salary"] = 123456789.0

        response = client.put(f"/api/jobs/{job.id}", json=sample_job_data)

        assert response.status_code == 422
        assert client.get(f"/api/jobs/{job.id}").json()["salary"] == 15.00


class TestJobDeletion:
    """Tests for job deletion"""

    def test_delete_job(self, client, sample_job_data):
        """Test deleting a job"""
        job_id = client.post("/api/jobs/", json=sample_job_data).json()["id"]

        response = client.delete(f"/api/jobs/{job_id}")
        assert response.status_code == 200
        assert "deleted" in response.json()["message"].lower()

        get_response = client.get(f"/api/jobs/{job_id}")
        assert get_response.status_code == 404

    def test_delete_nonexistent_job(self, client):
        """Test deleting a job that doesn't exist"""
        response = client.delete("/api/jobs/99999")
        assert response.status_code == 404


class TestJobSearch:
    """Tests for the search endpoint"""

    @pytest.fixture
    def board(self, add_job):
        today = date.today()
        add_job(title="Cashier", employer="Local Grocery Store", location="Downtown",
                salary=15.00, posted_date=today - timedelta(days=3))
        add_job(title="Cook", employer="Fast Food Restaurant", location="Mall Area",
                salary=16.50, description="Line cook position", posted_date=today - timedelta(days=1))
        add_job(title="Delivery Driver", employer="Pizza Place", location="Mall Area",
                salary=21.00, description="Evening shifts", posted_date=today)

    def test_search_without_criteria(self, client, board):
        """Test that all jobs come back newest first"""
        data = client.get("/api/jobs/search").json()

        assert [job["title"] for job in data] == ["Delivery Driver", "Cook", "Cashier"]

    def test_search_text_is_case_insensitive(self, client, board):
        """Test searching 'cook' finds the job titled 'Cook'"""
        data = client.get("/api/jobs/search", params={"search": "COOK"}).json()

        assert [job["title"] for job in data] == ["Cook"]

    def test_location_filter(self, client, board):
        """Test exact location filtering"""
        data = client.get("/api/jobs/search", params={"location": "Mall Area"}).json()

        assert {job["title"] for job in data} == {"Cook", "Delivery Driver"}

    def test_salary_min_filter(self, client, board):
        """Test that salary_min keeps only jobs at or above the bound"""
        data = client.get("/api/jobs/search", params={"salary_min": "18"}).json()

        assert [job["title"] for job in data] == ["Delivery Driver"]

    def test_unparsable_salary_bound_is_ignored(self, client, board):
        """Test that a non-numeric bound does not filter anything"""
        data = client.get("/api/jobs/search", params={"salary_min": "lots"}).json()

        assert len(data) == 3

    def test_sort_salary_high(self, client, board):
        """Test descending salary order"""
        data = client.get("/api/jobs/search", params={"sort_by": "salary-high"}).json()

        assert [job["salary"] for job in data] == [21.0, 16.5, 15.0]

    def test_listing_display_hints(self, client, board):
        """Test posted_ago and salary_band on search results"""
        data = client.get("/api/jobs/search").json()

        assert data[0]["posted_ago"] == "today"
        assert data[0]["salary_band"] == "high"
        assert data[1]["posted_ago"] == "1 day ago"
        assert data[1]["salary_band"] == "medium"


class TestJobViews:
    """Tests for suggestions, locations and analytics"""

    def test_suggestions(self, client, add_job):
        """Test autocomplete on title and employer"""
        add_job(title="Cashier", employer="Local Grocery Store")
        add_job(title="Stocker", employer="Retail Store")
        add_job(title="Cook", employer="Diner")

        data = client.get("/api/jobs/suggestions", params={"q": "store"}).json()

        assert {item["title"] for item in data} == {"Cashier", "Stocker"}
        assert set(data[0].keys()) == {"id", "title", "employer"}

    def test_suggestions_empty_query(self, client, add_job):
        """Test that an empty query gives no suggestions"""
        add_job()

        assert client.get("/api/jobs/suggestions").json() == []

    def test_locations(self, client, add_job):
        """Test distinct locations"""
        add_job(location="Downtown")
        add_job(location="Mall Area")
        add_job(location="Downtown")

        data = client.get("/api/jobs/locations").json()

        assert sorted(data) == ["Downtown", "Mall Area"]

    def test_analytics(self, client, add_job):
        """Test the analytics view over stored jobs"""
        today = date.today()
        add_job(salary=15.00, location="Downtown", posted_date=today)
        add_job(salary=20.00, location="Mall Area", posted_date=today)
        add_job(salary=17.00, location="Downtown", posted_date=today - timedelta(days=40))

        response = client.get("/api/jobs/analytics")

        assert response.status_code == 200
        data = response.json()
        assert data["total_jobs"] == 3
        assert data["average_salary"] == 17.33
        assert data["salary_distribution"] == {"Under $15": 0, "$15-$18": 2, "$18-$20": 0, "$20+": 1}
        assert data["job_count_by_location"] == {"Downtown": 2, "Mall Area": 1}
        assert len(data["postings_by_day"]) == 30
        assert data["postings_by_day"][-1] == 2
        assert sum(data["postings_by_day"]) == 2
        assert data["trend_dates"][-1] == today.isoformat()
        assert data["reference_date"] == today.isoformat()

    def test_analytics_empty(self, client):
        """Test analytics with no jobs"""
        data = client.get("/api/jobs/analytics").json()

        assert data["total_jobs"] == 0
        assert data["average_salary"] == 0
        assert data["postings_by_day"] == [0] * 30

    def test_analytics_huge_salaries(self, client, add_job):
        """Test rows with salaries near the float limit still aggregate"""
        add_job(salary=1e308, location="Downtown")
        add_job(salary=1e308, location="Downtown")

        response = client.get("/api/jobs/analytics")

        assert response.status_code == 200
        data = response.json()
        assert data["average_salary"] == 1e308
        assert data["average_salary_by_location"] == [{"location": "Downtown", "average": 1e308}]


class TestHealth:
    """Tests for health endpoints"""

    def test_health(self, client):
        """Test basic liveness"""
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_detailed_health(self, client, add_job):
        """Test database check in the detailed health endpoint"""
        add_job()

        data = client.get("/health/detailed").json()

        assert data["status"] == "healthy"
        assert data["checks"]["database"]["status"] == "healthy"
        assert data["checks"]["database"]["total_jobs"] == 1

    def test_root(self, client):
        """Test root endpoint"""
        assert client.get("/").json()["status"] == "healthy"
