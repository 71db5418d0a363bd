import pytest

from eschool_repository.domain.entities import Course, Review, User
from eschool_repository.exceptions import NotFoundError
from eschool_repository.repositories.review_repository import ReviewRepository


@pytest.mark.asyncio
class TestReviewRepository:
    """
    Reviews reference a user and a course.

    Fixtures used:
      - review_repository: ReviewRepository bound to the test AsyncSession.
      - created_user / created_course: persisted author and course.
    """

    async def test_create_round_trip(self, review_repository: ReviewRepository, created_user: User, created_course: Course):
        review = Review(user_id=created_user.id, course_id=created_course.id, text="Clear and well paced.")
        created = await review_repository.create(review)

        assert created.id
        assert created.text == review.text
        assert await review_repository.find_by_id(created.id) == created

    async def test_find_user_and_course_reviews(
        self, review_repository: ReviewRepository, create_user, created_course: Course, create_course
    ):
        alice = await create_user()
        bob = await create_user()
        other_course = await create_course(created_course.school_id)

        a1 = await review_repository.create(Review(user_id=alice.id, course_id=created_course.id, text="Great"))
        a2 = await review_repository.create(Review(user_id=alice.id, course_id=other_course.id, text="Good"))
        b1 = await review_repository.create(Review(user_id=bob.id, course_id=created_course.id, text="Okay"))

        by_alice = await review_repository.find_user_reviews(alice.id)
        assert sorted(r.id for r in by_alice) == sorted([a1.id, a2.id])

        of_course = await review_repository.find_course_reviews(created_course.id)
        assert sorted(r.id for r in of_course) == sorted([a1.id, b1.id])

        assert await review_repository.find_course_reviews("no-such-course") == []

    async def test_update_text(self, review_repository: ReviewRepository, created_user: User, created_course: Course):
        created = await review_repository.create(
            Review(user_id=created_user.id, course_id=created_course.id, text="First impression")
        )
        changed = Review(id=created.id, user_id=created.user_id, course_id=created.course_id, text="After finishing")

        assert await review_repository.update(changed) == changed

    async def test_delete_removes_only_the_review(
        self, review_repository: ReviewRepository, created_user: User, created_course: Course, course_repository
    ):
        """
        Behavior:
          - Deleting a review removes that review and nothing else; the course it
            belongs to is still there.
        """
        created = await review_repository.create(
            Review(user_id=created_user.id, course_id=created_course.id, text="To be removed")
        )
        await review_repository.delete(created.id)

        with pytest.raises(NotFoundError):
            await review_repository.find_by_id(created.id)
        assert await course_repository.find_by_id(created_course.id) == created_course
